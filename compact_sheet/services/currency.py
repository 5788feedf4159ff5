from typing import Dict, Union

from compact_sheet.models.sheet import Currency


def currency_labels(currencies: Dict[str, Union[Currency, dict]], show_full_names: bool) -> Dict[str, str]:
    """Label shown next to each currency amount."""
    labels = {}
    for key, currency in currencies.items():
        if not isinstance(currency, Currency):
            currency = Currency.model_validate(currency)
        labels[key] = currency.label if show_full_names else currency.abbreviation
    return labels
