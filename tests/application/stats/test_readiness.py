from retain.application.stats import card_readiness, score


def test_empty_scores_zero(now):
    assert score([], now) == 0


def test_base_scores(now, make_card, make_srs):
    assert card_readiness(make_card("n"), now) == 10
    assert card_readiness(make_card("l", make_srs(repetition_count=1, interval=1)), now) == 40
    assert card_readiness(make_card("r", make_srs(repetition_count=3, interval=10)), now) == 70
    assert card_readiness(make_card("m", make_srs(repetition_count=5, interval=40)), now) == 100


def test_overdue_penalty(now, make_card, make_srs):
    card = make_card("l", make_srs(repetition_count=1, interval=1, due_in_days=-2))
    assert card_readiness(card, now) == 30


def test_penalty_floor(now, make_card, make_srs):
    card = make_card("r", make_srs(repetition_count=3, interval=10, due_in_days=-30))
    assert card_readiness(card, now) == 10


def test_due_today_no_penalty(now, make_card, make_srs):
    card = make_card("m", make_srs(repetition_count=5, interval=40, due_in_days=-0.5))
    assert card_readiness(card, now) == 100


def test_new_cards_never_penalised(now, make_card, make_srs):
    # Failed card: has state but repetition_count 0, so it is "new"
    card = make_card("f", make_srs(repetition_count=0, interval=1, due_in_days=-10))
    assert card_readiness(card, now) == 10


def test_mean_rounds_half_up(now, make_card, make_srs):
    cards = [
        make_card("n"),
        make_card("l", make_srs(repetition_count=1, interval=1)),
        make_card("m1", make_srs(repetition_count=5, interval=40)),
        make_card("m2", make_srs(repetition_count=5, interval=40)),
    ]

    # (10 + 40 + 100 + 100) / 4 = 62.5
    assert score(cards, now) == 63


def test_score_within_bounds(now, make_card, make_srs):
    cards = [make_card(f"m{i}", make_srs(repetition_count=5, interval=40)) for i in range(3)]
    assert score(cards, now) == 100


def test_score_accepts_generator(now, make_card, make_srs):
    mastered = make_srs(repetition_count=5, interval=40)
    cards = (make_card(card_id, srs) for card_id, srs in [("n", None), ("m1", mastered), ("m2", mastered)])
    # (10 + 100 + 100) / 3 = 70
    assert score(cards, now) == 70
