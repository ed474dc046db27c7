"""Attribution models"""

from utm_attribution.models.attribution import (
    AttributionRecord,
    COOKIE_NAMES,
    CONTEXT_KEYS,
    PARAM_NAMES,
)
