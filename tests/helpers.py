import io


class ShortReadSource:
    """
    Byte source which returns at most chunk_size bytes per readinto,
    like a pipe or socket delivering data in small pieces.
    """

    def __init__(self, data, chunk_size=1):
        self.stream = io.BytesIO(data)
        self.chunk_size = chunk_size
        self.calls = 0

    def readinto(self, buffer):
        self.calls += 1
        return self.stream.readinto(buffer[: self.chunk_size])


class FailingSource:
    def __init__(self, error=None):
        self.error = error or BrokenPipeError("pipe closed")

    def readinto(self, buffer):
        raise self.error
