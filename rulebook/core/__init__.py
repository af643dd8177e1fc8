# Core module exports
from rulebook.core.config import Settings, get_settings
from rulebook.core.errors import (
    BundleFormatError,
    ErrorCode,
    I18nError,
    MessageNotFoundError,
    RuleDefinitionError,
    RulebookError,
)
from rulebook.core.logging import (
    configure_logging,
    get_logger,
    i18n_logger,
    validation_logger,
)
