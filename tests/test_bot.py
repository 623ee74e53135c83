from bot import GrindBot


def test_finished_ticker_leaves_the_registry() -> None:
    grind_bot = GrindBot()
    old = object()

    grind_bot.tickers[1] = old
    grind_bot.forget_ticker(1, old)
    assert 1 not in grind_bot.tickers


def test_replaced_ticker_does_not_evict_its_successor() -> None:
    grind_bot = GrindBot()
    old, new = object(), object()

    grind_bot.tickers[1] = new
    grind_bot.forget_ticker(1, old)
    assert grind_bot.tickers[1] is new
