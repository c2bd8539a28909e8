import pytest


def test_lazy_imports_and_caching():
    import institutionalized  # triggers institutionalized.__getattr__

    # First access loads and caches
    manager_cls = institutionalized.ProviderManager
    from institutionalized.llm import ProviderManager as RealManager

    assert manager_cls is RealManager
    # Second access should use cached value
    assert institutionalized.ProviderManager is RealManager


def test_unknown_attribute_raises():
    import institutionalized

    with pytest.raises(AttributeError):
        getattr(institutionalized, "TotallyUnknownSymbol")
