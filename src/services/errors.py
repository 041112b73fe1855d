"""
Error taxonomy for the extraction flow.

- FileReadError: an uploaded file could not be read (message names the file)
- ExtractionServiceError: the model call itself failed (network, auth, quota)
- EmptyExtractionError: the call succeeded but returned no usable text

Malformed tables are not errors: they render as whatever rows they parse into.
"""

EMPTY_RESULT_MESSAGE = "未能從圖片中提取到表格數據，請確保圖片文字清晰。"
GENERIC_FAILURE_MESSAGE = "辨識過程中發生錯誤"


class ExtractionFailure(Exception):
    kind = "extraction"


class ExtractionServiceError(ExtractionFailure):
    kind = "service"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyExtractionError(ExtractionFailure):
    kind = "empty_result"

    def __init__(self, message: str = EMPTY_RESULT_MESSAGE):
        super().__init__(message)


class FileReadError(Exception):
    kind = "file_read"

    def __init__(self, filename: str | None):
        self.filename = filename or "(unnamed)"
        super().__init__(f"檔案 {self.filename} 讀取失敗")


class UnsupportedMediaError(Exception):
    kind = "unsupported_media"


class ImageTooLargeError(Exception):
    kind = "too_large"


class ExtractionInProgressError(Exception):
    kind = "in_progress"
