"""
Tests for API layer.

Tests:
- LineService methods
- Request/response serialization
- Error conversion
- HTTP endpoints and OpenAPI schema
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ConditionInfo,
    DecodeOptionsInfo,
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    ErrorCode,
    ErrorResponse,
    FormatRequest,
    FormatResponse,
    ModifiersInfo,
    SkillLineInfo,
    ValidateRequest,
)
from ..api.service import LineService
from ..line import ConditionScope, DecodeOptions, LineContext


class TestLineService:
    """Tests for LineService."""

    @pytest.fixture
    def service(self):
        """Create a fresh service with strict defaults."""
        return LineService()

    def test_decode(self, service, mob_line_text):
        """Decoding returns the structured line and its canonical text."""
        response = service.decode(DecodeRequest(line=mob_line_text))

        assert isinstance(response, DecodeResponse)
        assert response.line.mechanic == "damage"
        assert response.line.trigger_params == {"interval": "20"}
        assert response.line.conditions[0].name == "health"
        assert response.canonical == mob_line_text[2:]

    def test_decode_error(self, service):
        """A decode failure becomes a DECODE_ERROR response."""
        response = service.decode(DecodeRequest(line="heal oops"))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.DECODE_ERROR
        assert response.details["kind"] == "TrailingGarbage"
        assert response.details["offset"] == 5
        assert response.details["segment"] == "oops"

    def test_decode_extract_modifiers(self, service):
        """extract_modifiers promotes scheduling params."""
        response = service.decode(
            DecodeRequest(line="message{m=hi;delay=40}", extract_modifiers=True)
        )
        assert response.line.mechanic_params == {"m": "hi"}
        assert response.line.modifiers.delay == 40
        assert response.canonical == "message{m=hi;delay=40}"

    def test_default_options(self):
        """Server defaults apply when the request sets no options."""
        service = LineService(default_options=DecodeOptions(allow_chance=True))
        response = service.decode(DecodeRequest(line="heal ~onDamaged 0.5"))
        assert response.line.chance == "0.5"

    def test_request_options_override(self):
        """Request options override the server defaults field by field."""
        service = LineService(default_options=DecodeOptions(allow_chance=True))
        request = DecodeRequest(
            line="heal ~onDamaged 0.5",
            options=DecodeOptionsInfo(allow_chance=False),
        )
        assert isinstance(service.decode(request), ErrorResponse)

    def test_encode(self, service):
        """A structured line is encoded canonically."""
        request = EncodeRequest(
            line=SkillLineInfo(mechanic="teleport", modifiers=ModifiersInfo(delay=40))
        )
        response = service.encode(request)
        assert isinstance(response, EncodeResponse)
        assert response.text == "teleport{delay=40}"

    def test_encode_list_item(self, service):
        """list_item adds the YAML marker."""
        request = EncodeRequest(
            line=SkillLineInfo(
                mechanic="heal",
                targeter="self",
                conditions=[ConditionInfo(name="isPlayer", scope=ConditionScope.TRIGGER)],
            ),
            list_item=True,
        )
        assert service.encode(request).text == "- heal @self ?~isPlayer"

    def test_encode_invalid_line(self, service):
        """Invalid structured lines become INVALID_LINE responses."""
        request = EncodeRequest(line=SkillLineInfo(mechanic="two words", targeter_params={"r": "1"}))
        response = service.encode(request)

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_LINE
        assert len(response.details["errors"]) == 2

    def test_decode_encode_round_trip(self, service, mob_line_text):
        """The decoded line encodes to the canonical text."""
        decoded = service.decode(DecodeRequest(line=mob_line_text))
        encoded = service.encode(EncodeRequest(line=decoded.line))
        assert encoded.text == decoded.canonical

    def test_format(self, service):
        """Lines are formatted, comments dropped."""
        response = service.format(FormatRequest(lines=["-  heal   @self", "# note", "damage{b=1;a=2}"],
                                                sort_params=True))
        assert isinstance(response, FormatResponse)
        assert response.lines == ["heal @self", "damage{a=2;b=1}"]

    def test_format_error_has_line_number(self, service):
        """The failing row is reported."""
        response = service.format(FormatRequest(lines=["heal", "", "heal oops"]))
        assert response.error_code == ErrorCode.DECODE_ERROR
        assert response.details["line_number"] == 3

    def test_validate(self, service):
        """Validation reports per line."""
        request = ValidateRequest(
            lines=["heal @self ~onAttack", "heal @self", "heal{a=1"],
            context=LineContext.MOB,
        )
        response = service.validate(request)

        assert response.total == 3
        assert response.valid == 1
        assert response.invalid == 2
        assert response.details[2].decode_error.kind == "UnbalancedBraces"
        assert response.details[2].decode_error.line_number == 3

    def test_health(self):
        """Health reports env and decode defaults."""
        service = LineService(default_options=DecodeOptions(allow_health_modifier=True), env="test")
        response = service.health()
        assert response.status == "ok"
        assert response.env == "test"
        assert response.allow_health_modifier is True
        assert response.allow_chance is False


class TestSchemas:
    """Tests for schema models."""

    def test_modifiers_bounds(self):
        """Modifier fields are range-checked."""
        with pytest.raises(ValidationError):
            ModifiersInfo(repeat=0)
        with pytest.raises(ValidationError):
            ModifiersInfo(delay=-1)

    def test_condition_scope_serializes(self):
        """Scopes are plain strings in JSON."""
        info = ConditionInfo(name="isPlayer", negated=True, scope=ConditionScope.TRIGGER)
        assert info.model_dump(mode="json") == {
            "name": "isPlayer", "params": "", "negated": True, "scope": "trigger",
        }

    def test_options_resolve(self):
        """Unset fields fall back to defaults."""
        defaults = DecodeOptions(allow_chance=True, allow_health_modifier=False)
        resolved = DecodeOptionsInfo(allow_health_modifier=True).resolve(defaults)
        assert resolved == DecodeOptions(allow_chance=True, allow_health_modifier=True)

    def test_error_code_values_are_strings(self):
        """Error codes are string enums for JSON serialization."""
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def client(self):
        """Test client over a fresh app."""
        from fastapi.testclient import TestClient
        from ..api.app import create_app

        return TestClient(create_app(LineService(env="test")))

    def test_health(self, client):
        """GET /api/v1/health responds."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["env"] == "test"

    def test_decode(self, client):
        """POST /api/v1/lines/decode returns the structured line."""
        response = client.post("/api/v1/lines/decode", json={"line": "- heal{amount=5} @self ?!isBurning"})
        assert response.status_code == 200

        body = response.json()
        assert body["canonical"] == "heal{amount=5} @self ?!isBurning"
        assert body["line"]["conditions"] == [
            {"name": "isBurning", "params": "", "negated": True, "scope": "caster"},
        ]

    def test_decode_error_is_422(self, client):
        """Decode failures are returned as ErrorResponse with 422."""
        response = client.post("/api/v1/lines/decode", json={"line": "damage{a=1"})
        assert response.status_code == 422

        body = response.json()
        assert body["error_code"] == "DECODE_ERROR"
        assert body["details"]["kind"] == "UnbalancedBraces"
        assert body["details"]["offset"] == 6

    def test_encode_round_trip(self, client):
        """The decoded JSON can be posted back to encode."""
        decoded = client.post("/api/v1/lines/decode", json={"line": "damage{a=1} @PIR{r=5} ~onAttack"}).json()
        response = client.post("/api/v1/lines/encode", json={"line": decoded["line"]})
        assert response.status_code == 200
        assert response.json()["text"] == decoded["canonical"]

    def test_encode_invalid_is_422(self, client):
        """Invalid structured lines are rejected."""
        response = client.post("/api/v1/lines/encode", json={"line": {"mechanic": "a b"}})
        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_LINE"

    def test_malformed_request_is_422(self, client):
        """A body that does not match the schema is a VALIDATION_ERROR."""
        response = client.post("/api/v1/lines/decode", json={"text": "heal"})
        assert response.status_code == 422

        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["loc"] == ["body", "line"]

    def test_format(self, client):
        """POST /api/v1/lines/format canonicalizes lines."""
        response = client.post(
            "/api/v1/lines/format",
            json={"lines": ["-   heal @self", "# comment"], "list_item": True},
        )
        assert response.status_code == 200
        assert response.json()["lines"] == ["- heal @self"]

    def test_validate(self, client):
        """POST /api/v1/lines/validate reports per line."""
        response = client.post(
            "/api/v1/lines/validate",
            json={"lines": ["heal @self ~onAttack"], "context": "skill"},
        )
        assert response.status_code == 200

        body = response.json()
        assert body["context"] == "skill"
        assert body["invalid"] == 1
        assert body["details"][0]["errors"] == [
            "Triggers cannot be used in skill files (only in mob files)"
        ]

    def test_openapi_schema(self, client):
        """Request and response models appear in the OpenAPI schema."""
        schema = client.get("/openapi.json").json()
        schemas = schema["components"]["schemas"]
        for name in ["DecodeResponse", "EncodeResponse", "ValidationReportResponse", "ErrorResponse"]:
            assert name in schemas, f"Missing schema: {name}"
        assert "/api/v1/lines/decode" in schema["paths"]
