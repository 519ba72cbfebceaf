"""Document store error taxonomy.

Every error carries a human-readable ``message`` and the HTTP status the API
layer should answer with. The service raises these; ``docstore.main``
registers one handler that renders them as ``{"statusCode", "message"}``.
"""


class DocumentStoreError(Exception):
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoFileProvided(DocumentStoreError):
    def __init__(self, message: str = "No file provided"):
        super().__init__(message)


class InvalidFileType(DocumentStoreError):
    def __init__(self, message: str = "Only PDF files are allowed"):
        super().__init__(message)


class FileTooLarge(DocumentStoreError):
    def __init__(self, max_size: int):
        super().__init__(f"File size exceeds maximum allowed size of {max_size} bytes")
        self.max_size = max_size


class StorageWriteError(DocumentStoreError):
    pass


class StorageQueryError(DocumentStoreError):
    pass


class StorageDeleteError(DocumentStoreError):
    pass


class DocumentNotFound(DocumentStoreError):
    status_code = 404
