"""Configuration parameters for the HTML transform pipeline."""


class Config:
    """Configuration class for transform parameters."""

    # Identifier remapping defaults; the API reads overrides from ID_PREFIX / NEW_ID_PREFIX
    ID_PREFIX = 'i'  # Prefix the upstream editor uses for generated ids
    NEW_ID_PREFIX = 'id-'

    # Reference attributes rewritten alongside remapped ids
    FRAGMENT_ATTRIBUTES = ('href',)
    LABEL_ATTRIBUTES = ('for',)

    # Style blocks carrying this attribute are left as-is
    EMBED_ATTRIBUTE = 'data-embed'
