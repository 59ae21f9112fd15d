"""Unit tests for custom exception hierarchy"""
import pytest
import httpx
import psycopg
from datetime import datetime
from src.exceptions import (
    PizzaAppError,
    ValidationError,
    DatabaseError,
    QueryError,
    ExternalAPIError,
    PlaceSearchAPIError,
    ConfigurationError,
    wrap_external_exception
)


class TestPizzaAppError:
    """Test base exception class"""

    def test_basic_exception(self):
        error = PizzaAppError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        error = PizzaAppError(
            message="Failed to save rating",
            user_id="user-1",
            operation="submit_rating",
            context={"pizzeria_id": "p-1"}
        )
        assert error.user_id == "user-1"
        assert error.operation == "submit_rating"
        assert error.context == {"pizzeria_id": "p-1"}

    def test_exception_is_logged(self, caplog):
        with caplog.at_level("ERROR", logger="src.exceptions"):
            PizzaAppError("logged error")
        assert "logged error" in caplog.text


class TestSubclasses:
    def test_validation_error_shows_message_to_user(self):
        error = ValidationError("Overall rating must be between 1 and 5", field="overall_rating", value=9)
        assert error.user_message == "Overall rating must be between 1 and 5"
        assert error.context == {"field": "overall_rating", "value": 9}

    def test_place_search_error_names_service(self):
        error = PlaceSearchAPIError("timeout", status_code=504)
        assert isinstance(error, ExternalAPIError)
        assert error.service == "OpenStreetMap"
        assert error.status_code == 504
        assert "OpenStreetMap" in error.user_message

    def test_configuration_error(self):
        error = ConfigurationError("DATABASE_URL missing", config_key="DATABASE_URL")
        assert error.config_key == "DATABASE_URL"


class TestWrapExternalException:
    def test_passes_through_app_errors(self):
        original = QueryError("bad sql")
        assert wrap_external_exception(original, "op") is original

    def test_wraps_psycopg_error(self):
        wrapped = wrap_external_exception(psycopg.OperationalError("server closed"), "get_pizzeria")
        assert isinstance(wrapped, QueryError)
        assert isinstance(wrapped, DatabaseError)
        assert wrapped.operation == "get_pizzeria"

    def test_wraps_httpx_status_error(self):
        request = httpx.Request("POST", "https://overpass.test")
        response = httpx.Response(503, request=request)
        error = httpx.HTTPStatusError("unavailable", request=request, response=response)

        wrapped = wrap_external_exception(error, "place_search")

        assert isinstance(wrapped, PlaceSearchAPIError)
        assert wrapped.status_code == 503

    def test_wraps_timeout(self):
        wrapped = wrap_external_exception(httpx.ReadTimeout("slow"), "place_search")
        assert isinstance(wrapped, PlaceSearchAPIError)

    def test_unknown_error_becomes_base_error(self):
        wrapped = wrap_external_exception(KeyError("x"), "discover", user_id="u-1")
        assert type(wrapped) is PizzaAppError
        assert wrapped.user_id == "u-1"
