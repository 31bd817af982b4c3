"""Judge prompt template and the default binary grading instructions."""

DEFAULT_JUDGE_INSTRUCTIONS = """\
IMPORTANT: The target observation describes what should be observed.
Even if the observation seems counterintuitive, surprising, or unexpected,
grade it as correct if the response accurately states this observation.

After assessing the response, reply with 'GRADE: $LETTER' where
LETTER is one of C or I.
Please choose ONE option: either 'C' for correct responses or 'I' for
incorrect responses.
First explain your reasoning, then end with GRADE: $LETTER.
Do not format the grading string and do not include any punctuation or
exposition after it."""

_TEMPLATE = """\
You are evaluating whether a model accurately described an observation.
[BEGIN DATA]
************
[Task]: The model was asked the following: {task}
************
[Target Observation]: {target}
************
[Model's Response]: {response}
************
[END DATA]
The Target Observation describes what should be observed.
Does the Model's Response contain this observation?
Ignore any differences in style, grammar, or punctuation.
{instructions}"""


def format_judge_prompt(
    task: str,
    target: str,
    response: str,
    instructions: str = DEFAULT_JUDGE_INSTRUCTIONS,
) -> str:
    """Render the judge prompt. Pure: identical inputs give identical prompts."""
    return _TEMPLATE.format(
        task=task,
        target=target,
        response=response,
        instructions=instructions,
    )
