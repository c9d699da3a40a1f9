# tests/test_task_extraction.py
#
# Tests for turning LLM replies into Task objects.

from datetime import datetime

import pytest

from digital_twin.scheduling import Priority
from digital_twin.services.llm_fallback import LLMResult, STATIC_PROVIDER, STATIC_REPLY
from digital_twin.services.task_extraction import extract_tasks, strip_code_fences, TaskExtractionError


NOW = datetime(2026, 10, 18, 10, 0)


def reply(text: str, provider: str = "ollama"):
    def generate(prompt, system=None):
        return LLMResult(text, provider)
    return generate


class TestStripCodeFences:

    def test_fenced_json(self):
        assert strip_code_fences('```json\n[{"task": "a"}]\n```') == '[{"task": "a"}]'

    def test_plain_text_is_trimmed(self):
        assert strip_code_fences('  [1, 2]\n') == '[1, 2]'


class TestExtractTasks:

    def test_tasks_are_normalized(self):
        text = '''```json
        [
          {"task": "Send invoice", "priority": "high", "deadline": "tomorrow", "duration_minutes": 30},
          {"task": "Book dentist", "priority": "whenever", "deadline": null},
          {"task": "Quarterly review", "priority": "low", "deadline": "05/11/2026", "duration_minutes": 90.0}
        ]
        ```'''

        tasks = extract_tasks("...", NOW, generate=reply(text))

        assert [task.description for task in tasks] == ["Send invoice", "Book dentist", "Quarterly review"]
        assert [task.priority for task in tasks] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]
        assert tasks[0].deadline == datetime(2026, 10, 19, 23, 59)
        assert tasks[1].deadline is None
        assert tasks[2].deadline == datetime(2026, 11, 5, 23, 59)
        assert [task.duration_minutes for task in tasks] == [30, 60, 90]

    def test_static_fallback_extracts_nothing(self):
        tasks = extract_tasks("...", NOW, generate=reply(STATIC_REPLY, STATIC_PROVIDER))
        assert tasks == []

    def test_invalid_json_raises(self):
        with pytest.raises(TaskExtractionError):
            extract_tasks("...", NOW, generate=reply("Sure! Here are your tasks: ..."))

    def test_non_array_raises(self):
        with pytest.raises(TaskExtractionError):
            extract_tasks("...", NOW, generate=reply('{"task": "single"}'))

    def test_missing_description_raises(self):
        with pytest.raises(TaskExtractionError):
            extract_tasks("...", NOW, generate=reply('[{"priority": "high"}]'))

    def test_numeric_string_duration_is_accepted(self):
        tasks = extract_tasks("...", NOW, generate=reply('[{"task": "Stand-up notes", "duration_minutes": " 45"}]'))
        assert tasks[0].duration_minutes == 45

    def test_non_numeric_string_duration_raises(self):
        with pytest.raises(TaskExtractionError):
            extract_tasks("...", NOW, generate=reply('[{"task": "x", "duration_minutes": "an hour"}]'))

    def test_bad_duration_raises(self):
        with pytest.raises(TaskExtractionError):
            extract_tasks("...", NOW, generate=reply('[{"task": "x", "duration_minutes": 0}]'))

    def test_prompt_is_sent_as_system(self):
        seen = {}

        def generate(prompt, system=None):
            seen["prompt"] = prompt
            seen["system"] = system
            return LLMResult("[]", "openai")

        assert extract_tasks("finish the slides by Friday", NOW, generate=generate) == []
        assert seen["prompt"] == "finish the slides by Friday"
        assert "JSON array" in seen["system"]
