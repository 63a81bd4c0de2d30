import asyncio
import inspect

import httpx

from master_chef.api.generate import generate_recipe
from master_chef.api.ui import generate_from_form
from master_chef.main import app
from master_chef.schemas.recipe import Nutrition, Recipe
from master_chef.services.generator_openai import RecipeGenerationError


class FakeGenerator:
    def __init__(self) -> None:
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        return Recipe(
            id="Shakshuka-1700000000000",
            name="Shakshuka",
            ingredients=["4 eggs", "1 can tomatoes"],
            instructions=["Simmer tomatoes.", "Poach eggs in the sauce."],
            prep_time="10 minutes",
            cook_time="20 minutes",
            servings="2 servings",
            nutrition=Nutrition(calories="300", protein="18 g", carbohydrates="15 g", fat="17 g"),
        )


class BrokenGenerator:
    def generate(self, _request):
        raise RecipeGenerationError("api_error", "Failed to generate recipe: quota exceeded")


def test_generate_happy_path_returns_recipe_and_records_history(monkeypatch) -> None:
    generator = FakeGenerator()
    monkeypatch.setattr("master_chef.api.generate.get_generator", lambda _settings=None: generator)
    payload = {
        "mode": "ingredients",
        "ingredients": ["egg", "tomato"],
        "equipment": ["skillet"],
        "mealType": "Breakfast",
        "dietaryRestrictions": "",
        "language": "en",
    }

    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/generate", json=payload)
            assert resp.status_code == 200
            body = resp.json()
            assert body["id"] == "Shakshuka-1700000000000"
            assert body["name"] == "Shakshuka"
            assert body["nutrition"]["protein"] == "18 g"

            history = await client.get("/history")
            assert [item["id"] for item in history.json()] == [body["id"]]

    asyncio.run(run())

    assert generator.requests[0].meal_type == "Breakfast"
    assert generator.requests[0].equipment == ["skillet"]


def test_generate_rejects_empty_ingredients_without_calling_generator(monkeypatch) -> None:
    generator = FakeGenerator()
    monkeypatch.setattr("master_chef.api.generate.get_generator", lambda _settings=None: generator)

    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/generate", json={"mode": "ingredients", "ingredients": []})
        assert resp.status_code == 422
        assert resp.json()["detail"] == {
            "code": "errorNoIngredients",
            "message": "Please add at least one ingredient.",
        }

    asyncio.run(run())
    assert generator.requests == []


def test_generate_rejects_blank_dish_name_with_localized_message(monkeypatch) -> None:
    monkeypatch.setattr("master_chef.api.generate.get_generator", lambda _settings=None: FakeGenerator())

    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post(
                "/generate", json={"mode": "dish", "dishName": "   ", "language": "es"}
            )
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "errorNoDishName"
        assert resp.json()["detail"]["message"] == "Escribe el nombre de un plato."

    asyncio.run(run())


def test_generate_rejects_invalid_payload_shape() -> None:
    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/generate", json={"mode": "menu", "ingredients": "egg"})
        assert resp.status_code == 422

    asyncio.run(run())


def test_generate_failure_returns_502_with_error_message_and_no_history(monkeypatch) -> None:
    monkeypatch.setattr(
        "master_chef.api.generate.get_generator", lambda _settings=None: BrokenGenerator()
    )

    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/generate", json={"ingredients": ["egg"]})
            assert resp.status_code == 502
            assert resp.json()["detail"] == {
                "code": "generation_failed",
                "message": "Failed to generate recipe: quota exceeded",
            }

            history = await client.get("/history")
            assert history.json() == []

    asyncio.run(run())


def test_generate_logs_safe_structured_fields(monkeypatch, caplog) -> None:
    monkeypatch.setattr(
        "master_chef.api.generate.get_generator", lambda _settings=None: BrokenGenerator()
    )

    async def run() -> None:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            with caplog.at_level("WARNING", logger="master_chef.api.generate"):
                resp = await client.post(
                    "/generate",
                    json={"ingredients": ["chicken"], "dietaryRestrictions": "kosher"},
                )
        assert resp.status_code == 502

    asyncio.run(run())

    records = [r for r in caplog.records if r.msg == "api_recipe_generation"]
    assert records
    record = records[-1]
    assert record.outcome == "failure"
    assert record.error_class == "api_error"
    assert record.mode == "ingredients"
    assert record.ingredients_count == 1
    assert "kosher" not in caplog.text
    assert "test-key" not in caplog.text


def test_generation_handlers_run_in_threadpool() -> None:
    assert not inspect.iscoroutinefunction(generate_recipe)
    assert not inspect.iscoroutinefunction(generate_from_form)
