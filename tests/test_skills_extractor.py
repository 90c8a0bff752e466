import sys
import unittest
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_assistant.core.config.extraction import get_extraction_limits  # noqa: E402
from cv_assistant.extraction.skills import extract_skills  # noqa: E402


class SkillsExtractorTests(unittest.TestCase):
    def test_technical_skills_category_tokens(self):
        text = "Jane Doe\n\nTechnical Skills\nProgramming Languages: Python, Go, Rust\n"
        self.assertEqual(extract_skills(text), ["Python", "Go", "Rust"])

    def test_inline_bullets_inside_section(self):
        text = "SKILLS\n• Languages: Python, Java • Databases: MySQL, MongoDB\n"
        self.assertEqual(extract_skills(text), ["Python", "Java", "MySQL", "MongoDB"])

    def test_section_spans_blank_lines_until_next_heading(self):
        text = (
            "Technical Skills\n"
            "Frontend: React, Vue\n"
            "\n"
            "Backend: Django, Flask\n"
            "Education\n"
            "Minor: Economics, Statistics\n"
        )
        self.assertEqual(extract_skills(text), ["React", "Vue", "Django", "Flask"])

    def test_acronym_bullet_inside_section(self):
        text = "Technical Skills\nLanguages: Python, Go\n• SQL\nQuery Engines: Presto, Trino\n"
        self.assertEqual(extract_skills(text), ["Python", "Go", "Presto", "Trino"])

    def test_category_lines_skipped_once_section_reaches_threshold(self):
        text = (
            "Technical Skills\n"
            "Languages: Python, Go, Rust, Java\n"
            "Frameworks: Django, Flask, React, Vue\n"
            "\n"
            "Education\n"
            "BSc Physics\n"
            "\n"
            "Databases: Oracle, Sybase\n"
        )
        section_skills = ["Python", "Go", "Rust", "Java", "Django", "Flask", "React", "Vue"]
        self.assertEqual(extract_skills(text), section_skills)

        higher_threshold = replace(get_extraction_limits(), skills_min_results=9)
        self.assertEqual(extract_skills(text, higher_threshold), section_skills + ["Oracle", "Sybase"])

    def test_category_lines_outside_a_skills_section(self):
        text = "Programming Languages: Python, Go\nCloud & DevOps: AWS, Docker\n"
        self.assertEqual(extract_skills(text), ["Python", "Go", "AWS", "Docker"])

    def test_generic_label_fallback(self):
        self.assertEqual(extract_skills("Skills: Python, SQL, Docker"), ["Python", "SQL", "Docker"])

    def test_duplicates_removed_and_length_filter(self):
        text = "Technical Skills\nLanguages: Python, Go, Python, C, " + ("x" * 45) + "\n"
        self.assertEqual(extract_skills(text), ["Python", "Go"])

    def test_cap_at_thirty(self):
        text = "Skills: " + ", ".join(f"Skill{i}" for i in range(50))
        skills = extract_skills(text)
        self.assertEqual(len(skills), 30)
        self.assertEqual(skills[0], "Skill0")
        self.assertEqual(len(set(skills)), 30)

    def test_custom_limits(self):
        limits = replace(get_extraction_limits(), skills_max_results=2)
        self.assertEqual(extract_skills("Skills: Python, SQL, Docker", limits), ["Python", "SQL"])

    def test_empty_text(self):
        self.assertEqual(extract_skills(""), [])
        self.assertEqual(extract_skills("Nothing relevant here."), [])


if __name__ == "__main__":
    unittest.main()
