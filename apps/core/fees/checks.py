from django.conf import settings
from django.core.checks import Error, register


@register()
def check_fees_year_start_month(app_configs, **kwargs):
    start_month = getattr(settings, 'FEES_YEAR_START_MONTH', 1)
    if isinstance(start_month, int) and 1 <= start_month <= 12:
        return []
    return [
        Error(
            f"FEES_YEAR_START_MONTH must be a month number between 1 and 12, got {start_month!r}.",
            hint='Set the FEES_YEAR_START_MONTH environment variable to the first month of the school year.',
            id='fees.E001',
        )
    ]
