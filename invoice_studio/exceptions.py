class InvoiceStudioError(Exception):
    """Base exception for invoice studio errors."""

    pass


class TemplateError(InvoiceStudioError):
    """Base exception for template parsing and rendering errors."""

    pass


class TemplateSyntaxError(TemplateError):
    """Raised when a template cannot be parsed."""

    def __init__(self, message: str, line: int) -> None:
        self.line: int = line
        super().__init__(f"{message} (line {line})")


class InvoiceEditError(InvoiceStudioError):
    """Base exception for rejected invoice mutations."""

    pass


class EntryNotFoundError(InvoiceEditError):
    """Raised when a mutation targets an id that is not on the invoice."""

    def __init__(self, collection: str, entry_id: str) -> None:
        self.collection: str = collection
        self.entry_id: str = entry_id
        super().__init__(f"No entry with id '{entry_id}' in {collection}")


class InvalidMutationError(InvoiceEditError):
    """Raised when a mutation names an unknown or protected field."""

    pass
