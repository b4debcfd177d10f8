"""Exceptions raised while publishing photos."""


class PhotoPipelineError(Exception):
    """Base class for every error raised by photo_pipeline."""


class PipelineError(PhotoPipelineError):
    """A single file could not be processed. Never halts a batch."""

    stage = "pipeline"

    def __init__(self, filename: str, cause: str):
        super().__init__(f"{filename}: {cause}")
        self.filename = filename
        self.cause = cause


class ProbeError(PipelineError):
    """File is unreadable or not a decodable image."""

    stage = "probe"


class TransformError(PipelineError):
    """Decoding worked but resize, composite or encode failed."""

    stage = "transform"


class PublishError(PipelineError):
    """Backup copy, temporary write or the final rename failed."""

    stage = "publish"


class SourceRootMissingError(PhotoPipelineError):
    """The directory (or single file) a run must work on does not exist."""

    def __init__(self, path, kind: str = "directory"):
        super().__init__(f"Source {kind} not found or not a {kind}: {path}")
        self.path = path
        self.kind = kind
