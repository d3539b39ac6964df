from importlib.metadata import PackageNotFoundError, version

try:
    version = version("TokenIO")
except PackageNotFoundError:
    version = "0.0.0"
