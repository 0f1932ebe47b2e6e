"""
Skill extraction against a fixed design vocabulary.

Skills on a stored job always come from SKILL_VOCABULARY, in its canonical
spelling. Free-form upstream tags are mapped into the vocabulary (or
dropped), never copied verbatim.
"""

from typing import Iterable, List, Optional

# Canonical names, in display order
SKILL_VOCABULARY = [
    # Tools
    'Figma', 'Sketch', 'Adobe XD', 'Photoshop', 'Illustrator', 'After Effects',
    'InVision', 'Framer', 'Principle', 'Webflow',
    # Front-end
    'HTML', 'CSS', 'JavaScript', 'React', 'Vue',
    # Product & UX
    'Product Design', 'UX Design', 'UI Design', 'User Research', 'Wireframing',
    'Prototyping', 'Usability Testing', 'Information Architecture',
    # Visual & brand
    'Visual Design', 'Brand Design', 'Graphic Design', 'Typography',
    'Illustration', 'Icon Design', 'Logo Design', 'Art Direction',
    # Interaction & motion
    'Interaction Design', 'Motion Design', 'Animation', 'Micro-interactions',
    'Video Editing', '3D Design',
    # Systems & strategy
    'Design Systems', 'Design Ops', 'Design Strategy', 'Accessibility',
    'Responsive Design', 'Design Tokens',
]

# Generic words that upstream tag lists are full of
EXCLUDED_SKILL_TERMS = {
    'designer', 'design', 'digital nomad', 'lead', 'senior', 'junior',
    'entry', 'mid', 'technical', 'remote', 'hybrid', 'onsite', 'full-time',
    'part-time', 'contract', 'freelance', 'manager', 'director', 'intern',
    'system', 'mobile', 'marketing', 'content', 'engineering',
}

# Tag spellings that mean a vocabulary skill
TAG_ALIASES = {
    'ux': 'UX Design',
    'ui': 'UI Design',
    'ui/ux': 'UI Design',
    'ux/ui': 'UX Design',
    'user experience': 'UX Design',
    'user interface': 'UI Design',
    'xd': 'Adobe XD',
    'after-effects': 'After Effects',
    'js': 'JavaScript',
    'reactjs': 'React',
    'react.js': 'React',
    'vue.js': 'Vue',
    'vuejs': 'Vue',
    'design system': 'Design Systems',
    'designops': 'Design Ops',
    'design ops': 'Design Ops',
    'research': 'User Research',
    'ux research': 'User Research',
    'wireframes': 'Wireframing',
    'prototype': 'Prototyping',
    'prototypes': 'Prototyping',
    'branding': 'Brand Design',
    'brand': 'Brand Design',
    'graphic': 'Graphic Design',
    'graphics': 'Graphic Design',
    'motion': 'Motion Design',
    'motion graphics': 'Motion Design',
    'illustrations': 'Illustration',
    'icons': 'Icon Design',
    'logo': 'Logo Design',
    'a11y': 'Accessibility',
    '3d': '3D Design',
    'responsive': 'Responsive Design',
}

_VOCAB_BY_LOWER = {skill.lower(): skill for skill in SKILL_VOCABULARY}


def extract_skills(text: Optional[str]) -> List[str]:
    """Vocabulary skills mentioned anywhere in text (case-insensitive substring match)"""
    if not text:
        return []
    lower = text.lower()
    return [skill for skill in SKILL_VOCABULARY if skill.lower() in lower]


def filter_skills(skills: Iterable[str]) -> List[str]:
    """Drop empty and generic entries, de-duplicate case-insensitively, keep first-seen order"""
    result: List[str] = []
    seen = set()
    for skill in skills:
        normalized = (skill or '').strip().lower()
        if not normalized or normalized in EXCLUDED_SKILL_TERMS or normalized in seen:
            continue
        seen.add(normalized)
        result.append(skill.strip())
    return result


def skills_from_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Map free-form upstream tags into the vocabulary; unknown tags are dropped"""
    if not tags:
        return []
    mapped = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        key = tag.strip().lower()
        if key in _VOCAB_BY_LOWER:
            mapped.append(_VOCAB_BY_LOWER[key])
        elif key in TAG_ALIASES:
            mapped.append(TAG_ALIASES[key])
    return mapped


def build_skills(text: Optional[str], tags: Optional[Iterable[str]] = None) -> List[str]:
    """
    Final skill list for a job: tag-mapped skills first, then skills found
    in the text, filtered and de-duplicated.

    Example:
        build_skills("Senior Figma Designer needed, remote") -> ['Figma']
    """
    return filter_skills(skills_from_tags(tags) + extract_skills(text))
