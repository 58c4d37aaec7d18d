"""Contains custom exceptions for the pyRadBio package."""


class PyRadBioError(Exception):
    """Exception for errors specifically thrown by pyRadBio."""


class ConstraintKindError(PyRadBioError, ValueError):
    """
    A constraint of unknown kind reached the objective evaluation.

    Signals malformed constraint data handed over by the structure loader.
    """

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown constraint kind '{kind}'")
