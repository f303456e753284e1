"""Static skill, job-title and language tables used by the analyzers.

The tables are read-only and shared by the whole process. Analyzers accept
a `SkillCatalog` so tests can inject their own; `get_default_catalog()`
builds the built-in one on first use.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from cvmatch.utils import dedupe_preserving_order

SKILL_SYNONYMS: dict[str, list[str]] = {
    # Microsoft Office suite
    "excel": ["microsoft office", "ms office", "office suite", "spreadsheet", "microsoft excel",
              "excel spreadsheet", "ms excel", "office excel", "excel 365", "excel 2019", "excel 2016"],
    "word": ["microsoft office", "ms office", "office suite", "microsoft word", "ms word",
             "office word", "word 365", "word 2019"],
    "powerpoint": ["microsoft office", "ms office", "office suite", "presentation",
                   "microsoft powerpoint", "ms powerpoint", "ppt", "powerpoint 365"],
    "microsoft office": ["excel", "word", "powerpoint", "ms office", "office suite", "outlook",
                         "access", "office 365", "office 2019", "office 2016", "msoffice"],
    "ms office": ["excel", "word", "powerpoint", "microsoft office", "office suite",
                  "office 365", "msoffice"],
    "office suite": ["microsoft office", "ms office", "excel", "word", "powerpoint", "office 365"],
    # Programming languages
    "react": ["react.js", "reactjs", "react js", "react native"],
    "react.js": ["react", "reactjs", "react js"],
    "reactjs": ["react", "react.js", "react js"],
    "node.js": ["nodejs", "node", "node js"],
    "nodejs": ["node.js", "node", "node js"],
    "node": ["node.js", "nodejs", "node js"],
    "javascript": ["js", "ecmascript", "es6", "es7", "es8", "typescript"],
    "js": ["javascript", "ecmascript", "es6", "es7", "es8"],
    "typescript": ["ts", "javascript", "js"],
    "ts": ["typescript"],
    "c++": ["cpp", "c plus plus", "cplusplus"],
    "c#": ["csharp", "c sharp", "dotnet", ".net"],
    ".net": ["dotnet", "c#", "csharp", "asp.net"],
    "python": ["py", "python3", "python 3"],
    # Frameworks and libraries
    "angular": ["angularjs", "angular.js", "angular 2", "angular 2+"],
    "angular.js": ["angular", "angularjs", "angular 2", "angular 2+"],
    "vue": ["vue.js", "vuejs", "vue js", "vue 3"],
    "vue.js": ["vue", "vuejs", "vue js", "vue 3"],
    "express": ["express.js", "expressjs", "express js"],
    # Databases
    "postgresql": ["postgres", "pg"],
    "postgres": ["postgresql", "pg"],
    "mongodb": ["mongo", "mongo db", "nosql"],
    "mongo": ["mongodb", "mongo db", "nosql"],
    "nosql": ["mongodb", "mongo", "mongo db"],
    "mysql": ["mariadb", "sql"],
    "sql": ["sql server", "mysql", "postgresql", "postgres", "database"],
    # Cloud and DevOps
    "aws": ["amazon web services", "amazon aws", "ec2", "s3", "lambda", "amazon cloud"],
    "docker": ["containerization", "containers", "dockerfile", "docker containers"],
    "kubernetes": ["k8s", "kube", "container orchestration"],
    "k8s": ["kubernetes", "kube", "container orchestration"],
    "git": ["github", "gitlab", "version control", "scm", "source control", "git version control"],
    # Methodologies
    "agile": ["scrum", "kanban", "sprint", "agile methodology", "agile development"],
    "scrum": ["agile", "sprint", "scrum master", "scrum methodology"],
    # Web technologies
    "html": ["html5", "hypertext markup language"],
    "html5": ["html", "hypertext markup language"],
    "css": ["css3", "stylesheet", "styling"],
    "css3": ["css", "stylesheet", "styling"],
    "rest": ["rest api", "restful", "restful api"],
    "rest api": ["rest", "restful", "restful api"],
    "api": ["rest", "rest api", "graphql", "web api", "apis"],
    # Design tools
    "photoshop": ["adobe photoshop", "ps", "adobe creative suite"],
    "illustrator": ["adobe illustrator", "ai", "adobe creative suite"],
    "figma": ["ui design", "ux design", "design tool"],
}

# Seniority-qualified titles imply more than the bare title does.
JOB_TITLE_SKILLS: dict[str, list[str]] = {
    # Developer roles
    "developer": ["programming", "coding", "software development", "problem solving", "git",
                  "debugging", "algorithms", "data structures"],
    "senior developer": ["programming", "coding", "software development", "problem solving", "git",
                         "debugging", "architecture", "mentoring", "code review", "algorithms",
                         "data structures", "system design", "best practices"],
    "software developer": ["programming", "coding", "software development", "problem solving",
                           "git", "debugging", "algorithms", "data structures"],
    "full stack developer": ["javascript", "html", "css", "database", "api", "frontend", "backend",
                             "full stack", "programming", "coding", "git"],
    "frontend developer": ["html", "css", "javascript", "ui", "ux", "responsive design", "frontend",
                           "programming", "coding", "git"],
    "backend developer": ["api", "database", "server", "backend", "rest", "sql", "programming",
                          "coding", "git"],
    "web developer": ["html", "css", "javascript", "web development", "responsive design",
                      "programming", "coding", "git"],
    "junior developer": ["programming", "coding", "software development", "problem solving", "git",
                         "debugging", "learning"],
    "mid-level developer": ["programming", "coding", "software development", "problem solving",
                            "git", "debugging", "algorithms", "data structures"],
    "lead developer": ["programming", "coding", "software development", "problem solving", "git",
                       "debugging", "architecture", "mentoring", "code review", "leadership",
                       "system design"],
    # Engineer roles
    "software engineer": ["programming", "coding", "software development", "problem solving", "git",
                          "debugging", "algorithms", "data structures", "system design"],
    "senior engineer": ["programming", "coding", "software development", "problem solving", "git",
                        "debugging", "architecture", "mentoring", "code review", "system design",
                        "algorithms", "data structures"],
    "senior software engineer": ["programming", "coding", "software development", "problem solving",
                                 "git", "debugging", "architecture", "mentoring", "code review",
                                 "system design", "algorithms", "data structures", "best practices"],
    "devops engineer": ["docker", "kubernetes", "ci/cd", "cloud", "aws", "infrastructure",
                        "automation", "scripting", "linux"],
    "qa engineer": ["testing", "quality assurance", "test automation", "bug tracking", "test cases"],
    "qa": ["testing", "quality assurance", "test automation", "bug tracking", "test cases"],
    # Manager roles
    "project manager": ["project management", "agile", "scrum", "planning", "coordination",
                        "communication"],
    "product manager": ["product management", "strategy", "planning", "communication", "analytics"],
    "team lead": ["leadership", "mentoring", "code review", "planning", "coordination"],
    # Data roles
    "data analyst": ["sql", "excel", "data analysis", "analytics", "reporting"],
    "data scientist": ["python", "sql", "machine learning", "data analysis", "statistics"],
    # Designer roles
    "ui designer": ["ui design", "figma", "photoshop", "illustrator", "design"],
    "ux designer": ["ux design", "user research", "wireframing", "prototyping", "figma"],
    "graphic designer": ["photoshop", "illustrator", "design", "creative", "adobe creative suite"],
}

# Well-known technologies reported even when the caller did not ask for them.
COMMON_SKILLS: list[str] = [
    "javascript", "python", "java", "react", "node.js", "sql", "html", "css",
    "typescript", "angular", "vue", "php", "ruby", "go", "rust", "c++", "c#",
    "aws", "docker", "kubernetes", "git", "mongodb", "postgresql", "mysql",
    "agile", "scrum", "api", "rest", "graphql", "microservices",
]

LANGUAGE_VARIANTS: dict[str, list[str]] = {
    "english": ["english", "fluent english", "native english"],
    "spanish": ["spanish", "español", "castellano"],
    "french": ["french", "français"],
    "german": ["german", "deutsch"],
    "chinese": ["chinese", "mandarin", "中文"],
    "arabic": ["arabic", "عربي"],
    "hindi": ["hindi", "हिंदी"],
    "portuguese": ["portuguese", "português"],
    "italian": ["italian", "italiano"],
    "japanese": ["japanese", "日本語"],
}


def normalize_skill(skill: str) -> str:
    """Normalize a skill name for matching.

    Lowercases, drops dots, turns hyphens and underscores into spaces,
    spells out `+` and collapses whitespace ("C++" -> "cplusplus",
    "React.js" -> "reactjs").
    """
    skill = skill.strip().lower()
    skill = skill.replace(".", "")
    skill = skill.replace("-", " ")
    skill = skill.replace("_", " ")
    skill = skill.replace("+", "plus")
    return " ".join(skill.split())


def _freeze(table: Mapping[str, Iterable[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


class SkillCatalog:
    """Read-only lookup tables for skill, job-title and language inference."""

    def __init__(
        self,
        synonyms: Mapping[str, Iterable[str]],
        job_title_skills: Mapping[str, Iterable[str]],
        common_skills: Iterable[str],
        language_variants: Mapping[str, Iterable[str]],
    ):
        self.synonyms = _freeze(synonyms)
        self.job_title_skills = _freeze(job_title_skills)
        self.common_skills = tuple(common_skills)
        self.language_variants = _freeze(language_variants)

        # First canonical key listing each synonym, in table order.
        reverse: dict[str, str] = {}
        for main_skill, skill_synonyms in self.synonyms.items():
            for synonym in skill_synonyms:
                reverse.setdefault(synonym.lower(), main_skill)
        self._reverse_synonyms = MappingProxyType(reverse)

    def get_skill_synonyms(self, skill: str) -> tuple[str, ...]:
        """Return the equivalence class of a skill.

        A canonical key returns itself followed by its synonyms. A term that
        only appears as a synonym returns its canonical key and that key's
        synonyms. Unknown skills return just themselves.
        """
        skill_lower = skill.strip().lower()

        if skill_lower in self.synonyms:
            return tuple(dedupe_preserving_order((skill_lower, *self.synonyms[skill_lower])))

        main_skill = self._reverse_synonyms.get(skill_lower)
        if main_skill is not None:
            return tuple(dedupe_preserving_order((main_skill, *self.synonyms[main_skill])))

        return (skill_lower,)

    def infer_skills_from_job_title(self, job_title: str) -> list[str]:
        """Infer implied skills from a job title.

        An exact title match wins. Otherwise every known title contained in
        the given one contributes its skills ("senior software developer"
        picks up "developer" and "software developer").
        """
        title_lower = job_title.strip().lower()
        if not title_lower:
            return []

        if title_lower in self.job_title_skills:
            return list(self.job_title_skills[title_lower])

        inferred: list[str] = []
        for title_key, skills in self.job_title_skills.items():
            if title_key in title_lower:
                inferred.extend(skills)

        return dedupe_preserving_order(inferred)

    def get_language_variants(self, language: str) -> tuple[str, ...] | None:
        """Return native-script and alternate names for a language, if known."""
        return self.language_variants.get(language.strip().lower())


_default_catalog: SkillCatalog | None = None


def get_default_catalog() -> SkillCatalog:
    """Get the singleton catalog built from the built-in tables."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = SkillCatalog(
            synonyms=SKILL_SYNONYMS,
            job_title_skills=JOB_TITLE_SKILLS,
            common_skills=COMMON_SKILLS,
            language_variants=LANGUAGE_VARIANTS,
        )
    return _default_catalog
