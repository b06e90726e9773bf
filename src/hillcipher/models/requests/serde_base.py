from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


def _either_case(name: str) -> AliasChoices:
    return AliasChoices(name, to_pascal(name))


class SerdeBase(BaseModel):
    """Accepts ``snake_case`` or ``PascalCase`` keys, always emits field names."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_either_case),
        populate_by_name=True,
        from_attributes=True,
    )
