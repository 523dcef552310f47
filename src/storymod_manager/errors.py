class StoryModError(Exception):
    pass


class StructuralError(StoryModError):
    """The render tree does not have the expected node shape."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


class TransformExecutionError(StoryModError):
    def __init__(self, mod_name: str, transform_name: str, cause: BaseException) -> None:
        self.mod_name = mod_name
        self.transform_name = transform_name
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"Transform {transform_name!r} of mod {mod_name!r} failed: {detail}")


class InvariantViolation(StoryModError):
    pass


class PatchInProgressError(StoryModError):
    pass
