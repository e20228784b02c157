from sqlalchemy import Enum as SAEnum


def ValueEnum(enum_cls, **kwargs):
    """
    Enum column that stores member values ("asset") rather than names ("ASSET"),
    matching the lowercase labels used by the PostgreSQL enum types.
    """
    return SAEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
        **kwargs,
    )
