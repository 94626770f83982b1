"""Principal domain exceptions."""


class PrincipalAlreadyExistsError(Exception):
    """A unique principal attribute (email or phone) is already taken."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Principal with this {field} already exists")
