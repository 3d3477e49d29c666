from dataclasses import asdict, fields, is_dataclass
from typing import Self


class GoogleResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Subclasses mirror an API resource with camelCase field names so the
    dict translation in both directions is just field-for-field.
    """

    @classmethod
    def from_base(cls, base: dict|Self|None) -> Self:
        """
        Build from the raw dict the client hands back.  Responses carry
        plenty of keys we don't model, those are dropped rather than
        blowing up the dataclass __init__.
        """
        if isinstance(base, cls):
            return base
        known = {f.name for f in fields(cls)} if is_dataclass(cls) else set()
        return cls(**{k: v for k, v in dict(base or {}).items() if k in known})

    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the client.  Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return asdict(self)

    def trim(self) -> dict:
        """
        Return the dict with top level None or empty container/string attributes
        removed, for requests that only want filled-in fields.
        Numbers and bools are kept since 0 and False are real values.
        """
        b = self.to_base()
        for k, v in list(b.items()):
            if v is None or (type(v) not in [int, bool, float] and not v):
                del b[k]
        return b

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass
