"""Tests for the static skill, job-title and language tables."""

import pytest

from cvmatch.skills.catalog import SkillCatalog, get_default_catalog, normalize_skill


@pytest.fixture
def catalog():
    return get_default_catalog()


class TestNormalizeSkill:
    def test_spells_out_plus(self):
        assert normalize_skill("C++") == "cplusplus"

    def test_drops_dots(self):
        assert normalize_skill("React.js") == "reactjs"

    def test_hyphens_and_underscores_become_spaces(self):
        assert normalize_skill("  Machine-Learning ") == "machine learning"
        assert normalize_skill("node_js") == "node js"

    def test_collapses_whitespace(self):
        assert normalize_skill("rest    api") == "rest api"


class TestGetSkillSynonyms:
    def test_canonical_key_includes_itself(self, catalog):
        synonyms = catalog.get_skill_synonyms("react")
        assert synonyms[0] == "react"
        assert "reactjs" in synonyms
        assert "react native" in synonyms

    def test_lookup_is_case_insensitive(self, catalog):
        assert catalog.get_skill_synonyms("ReactJS") == catalog.get_skill_synonyms("reactjs")

    def test_reverse_lookup_returns_canonical_class(self, catalog):
        synonyms = catalog.get_skill_synonyms("ecmascript")
        assert synonyms[0] == "javascript"
        assert "js" in synonyms

    def test_reverse_lookup_uses_first_listing_key(self, catalog):
        # "containerization" is only listed under docker
        assert catalog.get_skill_synonyms("containerization")[0] == "docker"

    def test_unknown_skill_returns_itself(self, catalog):
        assert catalog.get_skill_synonyms("COBOL") == ("cobol",)

    def test_no_duplicates(self, catalog):
        synonyms = catalog.get_skill_synonyms("microsoft office")
        assert len(synonyms) == len(set(synonyms))


class TestInferSkillsFromJobTitle:
    def test_exact_title(self, catalog):
        skills = catalog.infer_skills_from_job_title("Data Analyst")
        assert skills == ["sql", "excel", "data analysis", "analytics", "reporting"]

    def test_partial_titles_are_unioned(self, catalog):
        skills = catalog.infer_skills_from_job_title("senior frontend developer")
        # "developer" contributes first, then "frontend developer"
        assert skills[:2] == ["programming", "coding"]
        assert "responsive design" in skills
        assert "html" in skills
        assert skills.count("git") == 1

    def test_unknown_title(self, catalog):
        assert catalog.infer_skills_from_job_title("astronaut") == []

    def test_empty_title(self, catalog):
        assert catalog.infer_skills_from_job_title("") == []

    def test_returns_a_copy(self, catalog):
        skills = catalog.infer_skills_from_job_title("qa")
        skills.append("mutated")
        assert "mutated" not in catalog.infer_skills_from_job_title("qa")


class TestLanguageVariants:
    def test_known_language(self, catalog):
        assert "mandarin" in catalog.get_language_variants("Chinese")
        assert "中文" in catalog.get_language_variants("chinese")

    def test_unknown_language(self, catalog):
        assert catalog.get_language_variants("klingon") is None


class TestCatalogTables:
    def test_default_catalog_is_singleton(self):
        assert get_default_catalog() is get_default_catalog()

    def test_tables_are_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.synonyms["cobol"] = ("mainframe",)

    def test_custom_catalog(self):
        custom = SkillCatalog(
            synonyms={"k8s": ["kubernetes"]},
            job_title_skills={"sre": ["on-call"]},
            common_skills=["k8s"],
            language_variants={},
        )

        assert custom.get_skill_synonyms("kubernetes") == ("k8s", "kubernetes")
        assert custom.infer_skills_from_job_title("SRE") == ["on-call"]
        assert custom.common_skills == ("k8s",)
