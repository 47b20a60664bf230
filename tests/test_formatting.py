import json

from pg_ai_query.config import ResponseSettings
from pg_ai_query.formatting import format_outcome
from pg_ai_query.models.generation import ErrorKind, GenerationFailure, ModelOutcome

OUTCOME = ModelOutcome(
    success=True,
    generated_query="SELECT id FROM orders LIMIT 10",
    explanation="Ten orders.",
    warnings=["[WARN] ORDER: no ORDER BY, rows are arbitrary"],
    row_limit_applied=True,
    suggested_visualization="table",
)


def test_plain_output_with_default_toggles():
    text = format_outcome(OUTCOME, ResponseSettings())

    assert text == (
        "SELECT id FROM orders LIMIT 10\n"
        "\n"
        "-- Explanation: Ten orders.\n"
        "-- Warning: [WARN] ORDER: no ORDER BY, rows are arbitrary"
    )


def test_plain_output_honours_toggles():
    settings = ResponseSettings(
        show_explanation=False,
        show_warnings=False,
        show_suggested_visualization=True,
    )

    assert format_outcome(OUTCOME, settings) == (
        "SELECT id FROM orders LIMIT 10\n-- Suggested Visualization: table"
    )


def test_formatted_output_is_json():
    settings = ResponseSettings(use_formatted_response=True, show_warnings=False)

    document = json.loads(format_outcome(OUTCOME, settings))

    assert document == {
        "query": "SELECT id FROM orders LIMIT 10",
        "explanation": "Ten orders.",
        "row_limit_applied": True,
    }


def test_clarification_renders_the_question():
    outcome = ModelOutcome(success=True, explanation="Which year?")

    assert format_outcome(outcome, ResponseSettings()) == "Which year?"


def test_failure_renders_the_error():
    outcome = ModelOutcome.failed(
        GenerationFailure(kind=ErrorKind.EMPTY_RESPONSE, message="Empty response from AI service")
    )

    assert format_outcome(outcome, ResponseSettings()) == (
        "Query generation failed: Empty response from AI service"
    )
