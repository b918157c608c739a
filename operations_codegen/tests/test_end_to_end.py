import importlib
import json
import sys

import httpx
import pytest

from operations_codegen import CodeGeneratorConfig, FormatterConfig, GenerationConfig, generate
from operations_codegen.client import OperationsClient

USERS_UPDATE = {
    "operations": [
        {
            "name": "users/update",
            "kind": "mutation",
            "executionEngine": "nodejs",
            "variablesSchema": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "bio": {"type": "string"},
                },
                "required": ["id", "name"],
            },
            "responseSchema": {"type": "object", "properties": {"id": {"type": "string"}}},
        }
    ]
}


def settings(target):
    return CodeGeneratorConfig(target=target, formatter=FormatterConfig(enabled=False))


@pytest.fixture
def import_generated(tmp_path, monkeypatch):
    """Write generated Python files into a package and import one of its modules."""

    def load(files, package, module):
        package_dir = tmp_path / package
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("")
        for f in files:
            (package_dir / f.path).write_text(f.render())
        monkeypatch.syspath_prepend(str(tmp_path))
        return importlib.import_module(f"{package}.{module}")

    yield load
    for name in [n for n in sys.modules if n.startswith("generated_")]:
        del sys.modules[name]


class TestUsersUpdate:
    def test_go_models(self):
        files = generate(GenerationConfig.from_dict(USERS_UPDATE), settings("go"))
        models = next(f for f in files if f.path == "models.go").render()
        assert (
            "type Users_updateInput struct {\n"
            '\tId string `json:"id,omitempty"`\n'
            '\tName string `json:"name,omitempty"`\n'
            '\tBio *string `json:"bio,omitempty"`\n'
            "}"
        ) in models

    def test_python_models(self):
        files = generate(GenerationConfig.from_dict(USERS_UPDATE), settings("python"))
        assert [f.path for f in files] == ["models.py", "client.py"]
        models = files[0].render()
        assert models.startswith("# Code generated by operations_codegen")
        assert "class UsersUpdateInput:" in models
        assert '    bio: str | None = field(default=None, metadata=config(field_name="bio"))' in models
        assert "class UsersUpdateResponse:" in models
        assert "    data: UsersUpdateResponseData | None" in models

    def test_csharp_models(self):
        files = generate(GenerationConfig.from_dict(USERS_UPDATE), settings("csharp"))
        assert [f.path for f in files] == ["Models.cs"]
        assert "namespace Client;" in files[0].render()

    @pytest.mark.asyncio
    async def test_mutate_against_stub(self):
        def handler(request):
            return httpx.Response(200, json={"data": {"id": "1"}})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with OperationsClient("http://localhost:9991", http_client=http_client) as client:
            response = await client.mutate("users/update", {"id": "1", "name": "Jens", "bio": "Founder"})
        await http_client.aclose()

        assert response.data["id"] == "1"
        assert response.error is None


class TestGeneratedPython:
    def test_fields_named_like_model_helpers(self, import_generated):
        config = GenerationConfig.from_dict(
            {
                "operations": [
                    {
                        "name": "settings/update",
                        "kind": "mutation",
                        "executionEngine": "nodejs",
                        "variablesSchema": {
                            "type": "object",
                            "properties": {
                                "config": {"type": "string"},
                                "field": {"type": "string"},
                                "str": {"type": "string"},
                                "name": {"type": "string"},
                            },
                        },
                        "responseSchema": {"type": "object", "properties": {"ok": {"type": "boolean"}}},
                    }
                ]
            }
        )
        models = import_generated(generate(config, settings("python")), "generated_settings", "models")

        value = models.SettingsUpdateInput(config_="dark", field_="x", name="Jens")
        assert value.to_dict() == {"config": "dark", "field": "x", "str": None, "name": "Jens"}
        assert models.SettingsUpdateInput.from_dict({"config": "light"}).config_ == "light"

    @pytest.mark.asyncio
    async def test_client_omits_unset_optional_fields(self, import_generated):
        client_module = import_generated(
            generate(GenerationConfig.from_dict(USERS_UPDATE), settings("python")), "generated_users", "client"
        )
        models = importlib.import_module("generated_users.models")
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"data": {"id": "1"}})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with client_module.Client("http://localhost:9991", http_client=http_client) as client:
            response = await client.users_update(models.UsersUpdateInput(id="1", name="Jens"))
        await http_client.aclose()

        assert json.loads(requests[0].content)["input"] == {"id": "1", "name": "Jens"}
        assert response.data == models.UsersUpdateResponseData(id="1")
        assert response.error is None
