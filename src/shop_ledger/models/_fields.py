"""Field lookup shared by the model from_dict constructors."""


def _pick(data: dict[str, object], *names: str, default: object = None) -> object:
    """Return the first present, non-None value among several field names."""
    for name in names:
        value = data.get(name)
        if value is not None:
            return value
    return default
