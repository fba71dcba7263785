"""Tests for storefront.locale — locale providers and the request locale context."""

import pytest

from storefront.context import get_locale, locale_var
from storefront.errors import ConfigurationError
from storefront.locale import (
    LocaleContext,
    LocaleProvider,
    RequestLocaleContext,
    StaticLocaleProvider,
)


class TestStaticLocaleProvider:
    def test_returns_configured_locales(self) -> None:
        provider = StaticLocaleProvider(("en", "fr"), "fr")
        assert provider.get_locales() == ("en", "fr")
        assert provider.get_default_locale() == "fr"

    def test_empty_locales_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="At least one locale"):
            StaticLocaleProvider((), "en")

    def test_default_must_be_supported(self) -> None:
        with pytest.raises(ConfigurationError, match="'de' is not among"):
            StaticLocaleProvider(("en", "fr"), "de")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(StaticLocaleProvider(("en",), "en"), LocaleProvider)


class TestRequestLocaleContext:
    def test_falls_back_to_default(self) -> None:
        context = RequestLocaleContext(StaticLocaleProvider(("en", "fr"), "en"))
        assert context.get_locale() == "en"

    def test_reads_request_locale(self) -> None:
        context = RequestLocaleContext(StaticLocaleProvider(("en", "fr"), "en"))
        token = locale_var.set("fr")
        try:
            assert context.get_locale() == "fr"
            assert get_locale() == "fr"
        finally:
            locale_var.reset(token)
        assert get_locale("en") == "en"

    def test_satisfies_protocol(self) -> None:
        context = RequestLocaleContext(StaticLocaleProvider(("en",), "en"))
        assert isinstance(context, LocaleContext)
