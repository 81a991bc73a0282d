"""Groups a flat skill list into the categories shown to recruiters."""

from typing import Dict, Iterable, List

SKILL_CATALOG: Dict[str, List[str]] = {
    "programming_languages": [
        "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Go", "Rust",
        "PHP", "Ruby", "Swift", "Kotlin",
    ],
    "frameworks": [
        "React", "Vue", "Angular", "Node.js", "Express", "Django", "Flask",
        "Spring", "Laravel", "Rails",
    ],
    "databases": ["PostgreSQL", "MySQL", "MongoDB", "Redis", "Elasticsearch", "DynamoDB", "SQLite"],
    "cloud_platforms": ["AWS", "Azure", "Google Cloud", "Docker", "Kubernetes", "Terraform"],
    "tools": ["Git", "Jenkins", "Jira", "VS Code", "IntelliJ", "Figma", "Slack"],
    "methodologies": ["Agile", "Scrum", "CI/CD", "DevOps", "Microservices", "TDD", "BDD"],
    "soft_skills": [
        "Leadership", "Communication", "Teamwork", "Problem Solving",
        "Time Management", "Adaptability",
    ],
    "domain_knowledge": [
        "Machine Learning", "Data Science", "Cybersecurity", "Blockchain", "IoT",
        "Mobile Development",
    ],
}

_LOOKUP = {
    skill.lower(): category
    for category, skills in SKILL_CATALOG.items()
    for skill in skills
}


def categorize_skills(skills: Iterable[str]) -> Dict[str, List[str]]:
    """Buckets skills by category (case-insensitive), keeping the original spelling.

    Skills that match no catalog entry land in 'other'. Duplicates are dropped.
    """
    categories: Dict[str, List[str]] = {category: [] for category in SKILL_CATALOG}
    categories["other"] = []
    seen = set()
    for skill in skills:
        key = skill.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        categories[_LOOKUP.get(key, "other")].append(skill.strip())
    return categories
