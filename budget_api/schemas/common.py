import re
from decimal import Decimal
from typing import ClassVar, Literal, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints, model_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

AMOUNT_PATTERN = r"^\d+(\.\d{1,2})?$"


def _amount_string(value):
    if not isinstance(value, str) or not re.fullmatch(AMOUNT_PATTERN, value):
        raise ValueError("must be a decimal string with at most two decimal places")
    return value


# Amounts travel as decimal strings and are handled as Decimal once parsed
Amount = Annotated[Decimal, BeforeValidator(_amount_string)]

HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9a-fA-F]{6}$")]

Kind = Literal["income", "expense"]

# Icons the presentation layer knows how to render
IconName = Literal[
    "ShoppingCart", "Home", "Car", "Utensils", "Smartphone", "DollarSign",
    "Briefcase", "Target", "PiggyBank", "Plane", "GraduationCap", "Heart",
    "Gift", "Zap", "Wallet", "Tag",
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PartialUpdate(CamelModel):
    """Base for PATCH bodies: every field optional, but columns listed in
    ``not_nullable`` may not be explicitly set to null."""

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Message(BaseModel):
    success: bool = True
