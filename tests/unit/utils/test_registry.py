import pytest

from ragviz.utils.registry import ComponentRegistry, mask_secrets


class Shape:
    pass


class Square(Shape):
    pass


class ShapeRegistry(ComponentRegistry):
    _base = Shape
    _kind = "shape"
    _registry = {"square": Square}


class TestComponentRegistry:

    def test_lookup(self):
        assert ShapeRegistry.lookup("square") is Square

    def test_unknown_type_lists_available(self):
        with pytest.raises(ValueError, match="Unknown shape type: 'circle'. Available types: square"):
            ShapeRegistry.lookup("circle")

    def test_register(self, monkeypatch):
        monkeypatch.setattr(ShapeRegistry, "_registry", dict(ShapeRegistry._registry))

        class Triangle(Shape):
            pass

        ShapeRegistry.register("triangle", Triangle)
        assert ShapeRegistry.list_types() == ["square", "triangle"]

    @pytest.mark.parametrize("bad", [int, "not a class"])
    def test_register_rejects_foreign_types(self, bad):
        with pytest.raises(TypeError, match="must be a subclass of Shape"):
            ShapeRegistry.register("bad", bad)


def test_mask_secrets():
    masked = mask_secrets({"api_key": "sk-1", "model": "m", "timeout": 5})
    assert masked == {"api_key": "***", "model": "m", "timeout": 5}
    assert mask_secrets({"api_key": ""}) == {"api_key": ""}
