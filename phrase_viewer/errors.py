# errors.py


class PhraseViewerError(Exception):
    """Base class for all errors raised by the viewer."""


class DocumentLoadFailure(PhraseViewerError):
    """The document could not be opened. Terminal for the viewer session."""

    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to open document {source!r}: {reason}")


class PageRenderFailure(PhraseViewerError):
    """Rendering one page failed; other pages of the pass are unaffected."""

    def __init__(self, page_number: int, generation: int, reason):
        self.page_number = page_number
        self.generation = generation
        self.reason = reason
        super().__init__(
            f"Rendering error on page {page_number} (generation {generation}): {reason}"
        )


class ViewerNotReady(PhraseViewerError):
    """An operation was requested in a state that does not allow it."""

    def __init__(self, operation: str, state):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while viewer is {state.value}")
