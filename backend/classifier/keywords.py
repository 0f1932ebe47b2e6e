"""
Keyword tables for the design-job classifier.

Kept as plain data so the lists can be tuned without touching the
decision logic in design_jobs.py.
"""

import re

# Tier 1: any of these in the title rejects the posting outright.
# Matched at a word start, so plurals and inflections ("Engineers", "Engineering")
# are caught too.
EXCLUDE_KEYWORDS = [
    # Engineering roles
    'software engineer', 'backend engineer', 'frontend engineer', 'full stack engineer',
    'fullstack engineer', 'devops engineer', 'sre', 'site reliability',
    'platform engineer', 'infrastructure engineer', 'data engineer',
    'machine learning engineer', 'ml engineer', 'ai engineer',
    'security engineer', 'network engineer', 'systems engineer',
    'qa engineer', 'test engineer', 'automation engineer',
    'embedded engineer', 'firmware engineer', 'hardware engineer',
    'cloud engineer', 'solutions engineer', 'sales engineer',

    # Developer roles
    'software developer', 'web developer', 'mobile developer',
    'ios developer', 'android developer', 'react developer',
    'node developer', 'python developer', 'java developer',
    'ruby developer', 'php developer', 'golang developer',
    '.net developer', 'c++ developer', 'rust developer',

    # Other technical roles
    'data scientist', 'data analyst', 'business analyst',
    'product manager', 'project manager', 'program manager',
    'scrum master', 'agile coach', 'technical writer',
    'system administrator', 'database administrator', 'dba',
    'architect', 'solutions architect', 'technical architect',

    # Operations & support
    'customer support', 'customer success', 'account manager',
    'sales representative', 'business development', 'recruiter',
    'hr manager', 'people operations', 'office manager',
    'finance', 'accountant', 'bookkeeper', 'controller',
    'legal', 'paralegal', 'compliance', 'attorney',

    # Marketing (non-design)
    'seo specialist', 'sem specialist', 'ppc specialist',
    'growth hacker', 'performance marketing', 'email marketing',
    'content writer', 'copywriter', 'content strategist',
    'social media manager', 'community manager',

    # Specific exclusions
    'accelerator', 'manager api', 'api development',
    'reliability', 'instructor', 'teacher', 'professor',
    'researcher', 'scientist', 'analyst',

    # Leadership, advisory and training roles
    'ai developer', 'growth marketer', 'content manager',
    'content specialist', 'social media specialist', 'cloud expert',
    'cloud-experte', 'aws', 'azure', 'gcp', 'kubernetes',
    'data ops', 'dataops', 'mlops', 'technical lead',
    'tech lead', 'engineering manager', 'cto', 'cio',
    'vp engineering', 'head of engineering', 'director of engineering',
    'marketing manager', 'marketing director', 'head of marketing',
    'operations manager', 'operations director', 'coo',
    'chief', 'officer', 'president', 'founder', 'co-founder',
    'consultant', 'advisor', 'strategist', 'coordinator',
    'assistant', 'intern', 'trainee', 'apprentice',
    'mentor', 'coach', 'trainer',
]

# Short terms that would fire inside unrelated words ("Director", "International")
# match only as whole words, with an optional plural 's'.
EXCLUDE_WHOLE_WORDS = ['cto', 'cio', 'coo', 'sre', 'dba', 'aws', 'gcp', 'intern']

# Tier 2: the title must mention at least one of these (matched at a word start)
DESIGN_KEYWORDS = [
    # Job titles
    'designer', 'design', 'ux', 'ui', 'ui/ux', 'ux/ui', 'product designer',
    'graphic designer', 'visual designer', 'brand designer', 'web designer',
    'interaction designer', 'experience designer', 'creative director',
    'art director', 'design director', 'design lead', 'design manager',
    'motion designer', 'motion graphics', 'animator', 'illustrator',
    'icon designer', 'layout designer', 'print designer', 'packaging designer',
    'environmental designer', 'exhibition designer', 'signage designer',
    'presentation designer', 'email designer', 'marketing designer',
    'digital designer', 'multimedia designer', 'communication designer',

    # Specializations
    'user experience', 'user interface', 'human centered', 'human-centered',
    'service design', 'design thinking', 'design systems', 'design ops',
    'designops', 'design operations', 'content design', 'conversational design',
    'game designer', 'level designer', 'character designer', 'concept artist',
    'storyboard artist', 'visual development', 'texture artist',

    # Tools
    'figma', 'sketch', 'adobe xd', 'invision', 'framer', 'principle',
    'origami', 'protopie', 'axure', 'balsamiq', 'marvel', 'zeplin',
    'photoshop', 'illustrator', 'indesign', 'after effects', 'premiere',
    'lightroom', 'xd', 'creative cloud', 'creative suite',
    'cinema 4d', 'blender', 'maya', '3ds max', 'zbrush',
    'procreate', 'affinity', 'canva', 'webflow', 'readymag',

    # Skills & methods
    'wireframe', 'wireframing', 'prototype', 'prototyping', 'mockup',
    'user research', 'usability', 'usability testing', 'a/b testing',
    'user testing', 'heuristic', 'accessibility', 'wcag', 'ada compliant',
    'information architecture', 'ia', 'sitemap', 'user flow', 'user journey',
    'persona', 'empathy map', 'card sorting', 'tree testing',
    'typography', 'typographic', 'color theory', 'visual hierarchy',
    'gestalt', 'grid system', 'responsive design', 'mobile first',
    'atomic design', 'component library', 'style guide', 'brand guidelines',
    'moodboard', 'mood board', 'storyboard', 'artboard',

    # Outputs
    'branding', 'brand identity', 'logo', 'logotype', 'wordmark',
    'icon', 'iconography', 'illustration', 'infographic', 'data viz',
    'data visualization', 'dashboard design', 'app design', 'web design',
    'landing page', 'marketing collateral', 'social media design',
    'banner', 'advertisement', 'ad design', 'campaign design',
    'packaging', 'label design', 'book design', 'editorial design',
    'publication design', 'poster', 'flyer', 'brochure',
]

# Tier 3: anchored patterns that on their own mark a design role
DESIGN_TITLE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r'\bdesigner\b',
        r'\bux\b',
        r'\bui\b',
        r'\bux/ui\b',
        r'\bui/ux\b',
        r'\bart director\b',
        r'\bcreative director\b',
        r'\bdesign lead\b',
        r'\bdesign manager\b',
        r'\bhead of design\b',
        r'\bvp design\b',
        r'\billustrator\b',
        r'\banimator\b',
        r'\bmotion\s*(designer|graphics)\b',
        r'\bbrand\s*(designer|design)\b',
        r'\bvisual\s*(designer|design)\b',
        r'\bgraphic\s*(designer|design)\b',
        r'\bproduct\s*designer\b',
        r'\bweb\s*designer\b',
        r'\binteraction\s*designer\b',
        r'\bexperience\s*designer\b',
    )
]

# Tier 4: whitelisted title fragments
CORE_DESIGN_TITLES = [
    'designer', 'design lead', 'design manager', 'design director',
    'head of design', 'vp of design', 'creative director', 'art director',
    'illustrator', 'animator', 'motion graphics',
]

# Tier 5: a tag fallback needs one of each
DESIGN_TAGS = {'design', 'designer'}
DESIGN_TOOL_TAGS = {'figma', 'sketch', 'adobe', 'photoshop', 'illustrator', 'xd', 'invision', 'framer'}
