import unittest

from support import JOB_DESCRIPTION, RESUME_TEXT

from resume_builder.analysis import heuristics


class KeywordTests(unittest.TestCase):
    def test_extract_keywords_drops_stop_words_and_short_tokens(self):
        words = heuristics.extract_keywords("We need an engineer with Python, SQL and AWS on the team.")
        self.assertIn("python", words)
        self.assertIn("engineer", words)
        self.assertNotIn("with", words)
        self.assertNotIn("on", words)
        self.assertNotIn("we", words)

    def test_extract_keywords_handles_empty(self):
        self.assertEqual(heuristics.extract_keywords(""), [])
        self.assertEqual(heuristics.extract_keywords(None), [])

    def test_importance_uses_occurrence_counts(self):
        jd = "python " * 5 + "sql sql docker"
        self.assertEqual(heuristics.keyword_importance("python", jd), "high")
        self.assertEqual(heuristics.keyword_importance("sql", jd), "medium")
        self.assertEqual(heuristics.keyword_importance("docker", jd), "low")

    def test_category_lookup(self):
        self.assertEqual(heuristics.keyword_category("kubernetes"), "Technical Skills")
        self.assertEqual(heuristics.keyword_category("leadership"), "Soft Skills")

    def test_matching_keywords_are_deduplicated(self):
        job = heuristics.extract_keywords("python python docker terraform")
        resume = heuristics.extract_keywords("python docker")
        matched = heuristics.find_matching_keywords(job, resume, "python python docker terraform")
        missing = heuristics.find_missing_keywords(job, resume, "python python docker terraform")
        self.assertEqual([k["text"] for k in matched], ["python", "docker"])
        self.assertEqual([k["text"] for k in missing], ["terraform"])
        self.assertEqual(heuristics.keyword_match_percentage(len(matched), len(missing)), 67)

    def test_match_percentage_zero_when_nothing_matches(self):
        self.assertEqual(heuristics.keyword_match_percentage(0, 5), 0)
        self.assertEqual(heuristics.keyword_match_percentage(0, 0), 0)

    def test_top_terms_by_frequency(self):
        self.assertEqual(heuristics.top_terms("docker python docker sql docker python", 2), ["docker", "python"])


class ScoreBoundsTests(unittest.TestCase):
    SAMPLES = [
        "",
        "x",
        RESUME_TEXT,
        RESUME_TEXT * 20,
        "• " * 500,
        "EXPERIENCE\nEDUCATION\nSKILLS\nPROJECTS\n\n\n\n" + "developed 10% " * 300,
    ]

    def test_ats_score_within_bounds(self):
        for text in self.SAMPLES:
            for jd in ("", JOB_DESCRIPTION):
                with self.subTest(text=text[:20], jd=bool(jd)):
                    matched = len(heuristics.find_matching_keywords(
                        heuristics.extract_keywords(jd), heuristics.extract_keywords(text), jd
                    ))
                    score = heuristics.calculate_ats_score(text, jd, matched)
                    self.assertGreaterEqual(score, 0)
                    self.assertLessEqual(score, 100)

    def test_ats_compatibility_within_bounds(self):
        for text in self.SAMPLES:
            for match_score in (None, 0, 55, 250):
                with self.subTest(text=text[:20], match_score=match_score):
                    result = heuristics.calculate_ats_compatibility(text, match_score)
                    self.assertGreaterEqual(result["score"], 0)
                    self.assertLessEqual(result["score"], 100)
                    for value in result["details"].values():
                        self.assertGreaterEqual(value, 0)
                        self.assertLessEqual(value, 100)

    def test_metrics_are_capped_at_100_percent(self):
        for metric in heuristics.generate_metrics(100, 100, RESUME_TEXT * 20):
            self.assertLessEqual(int(metric["value"].rstrip("%")), 100)


class AnalysisTests(unittest.TestCase):
    def test_analyze_resume_text_shape(self):
        result = heuristics.analyze_resume_text(RESUME_TEXT, JOB_DESCRIPTION)
        matched = {k["text"] for k in result["matched_keywords"]}
        missing = {k["text"] for k in result["missing_keywords"]}
        self.assertIn("python", matched)
        self.assertIn("terraform", missing)
        self.assertTrue(0 < result["match_score"] < 100)
        self.assertEqual(len(result["metrics"]), 4)
        self.assertIn("experience", result["section_recommendations"])
        self.assertTrue(result["overall_suggestions"])

    def test_recommendations_for_thin_resume(self):
        recs = heuristics.generate_recommendations("John Smith")
        self.assertTrue(any("quite short" in rec for rec in recs))
        self.assertTrue(any('"Education"' in rec for rec in recs))

    def test_resume_plain_text_flattens_sections(self):
        resume = {
            "name": "CV",
            "sections": [
                {"title": "Skills", "content": {"languages": ["Python", "Go"]}},
                {"title": "Experience", "content": ["Built APIs", {"role": "Engineer"}]},
            ],
        }
        text = heuristics.resume_plain_text(resume)
        self.assertEqual(text.splitlines(), ["CV", "SKILLS", "Python", "Go", "EXPERIENCE", "Built APIs", "role: Engineer"])


if __name__ == "__main__":
    unittest.main()
