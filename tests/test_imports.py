def test_import_soulforge_package() -> None:
    import importlib

    module = importlib.import_module("soulforge")
    assert module is not None


def test_import_rng_no_side_effects() -> None:
    from soulforge.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_import_services_package() -> None:
    from soulforge.services import GameSession, OperationResult, StateStore

    assert GameSession is not None
    assert OperationResult is not None
    assert StateStore is not None
