from unittest.mock import MagicMock

import pytest

from talentmatch.infrastructure.optimization.token_estimator import (
    CostEstimate,
    TokenEstimator,
    estimate_parsing_cost,
)

MODULE = "talentmatch.infrastructure.optimization.token_estimator"


@pytest.fixture
def offline_estimator(mocker):
    mocker.patch(f"{MODULE}.tiktoken.get_encoding", side_effect=Exception("no network"))
    return TokenEstimator()


def test_uses_tiktoken_encoding(mocker):
    encoding = MagicMock()
    encoding.encode.return_value = [1, 2, 3]
    get_encoding = mocker.patch(f"{MODULE}.tiktoken.get_encoding", return_value=encoding)

    estimator = TokenEstimator()

    get_encoding.assert_called_once_with("cl100k_base")
    assert estimator.estimate_tokens("three tokens here") == 3


def test_falls_back_to_character_approximation(offline_estimator):
    assert offline_estimator.tokenizer is None
    assert offline_estimator.estimate_tokens("a" * 41) == 10


def test_empty_text_has_no_tokens(offline_estimator):
    assert offline_estimator.estimate_tokens("") == 0


def test_parsing_cost(offline_estimator):
    estimate = estimate_parsing_cost("a" * 4000, estimator=offline_estimator)

    assert estimate.input_tokens == 1000
    assert estimate.input_cost == pytest.approx(0.00015)
    assert estimate.output_cost == pytest.approx(0.0012)
    assert estimate.total == pytest.approx(0.00135)


def test_cost_total():
    assert CostEstimate(input_tokens=0, input_cost=0.5, output_cost=0.25).total == 0.75
