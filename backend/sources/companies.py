"""
Company boards polled by the ATS adapters.

Each board is fetched with one request; boards that 404 (company moved ATS)
are logged and skipped. Sequential fetching keeps the whole ATS group
within one invocation budget, so keep these lists short.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class CompanyBoard:
    name: str   # Display name stored on the job
    slug: str   # Board identifier in the ATS URL


GREENHOUSE_BOARDS: List[CompanyBoard] = [
    # Design tools
    CompanyBoard('Figma', 'figma'),
    CompanyBoard('Canva', 'canva'),
    CompanyBoard('Webflow', 'webflow'),
    CompanyBoard('Framer', 'framer'),
    CompanyBoard('Mural', 'mural'),
    # Consumer & fintech
    CompanyBoard('Stripe', 'stripe'),
    CompanyBoard('Airbnb', 'airbnb'),
    CompanyBoard('Dropbox', 'dropbox'),
    CompanyBoard('Pinterest', 'pinterest'),
    CompanyBoard('Reddit', 'reddit'),
    CompanyBoard('Lyft', 'lyft'),
    # Productivity
    CompanyBoard('Notion', 'notion'),
    CompanyBoard('Asana', 'asana'),
    CompanyBoard('Coda', 'coda'),
]

LEVER_BOARDS: List[CompanyBoard] = [
    CompanyBoard('Twitch', 'twitch'),
    CompanyBoard('Discord', 'discord'),
    CompanyBoard('Palantir', 'palantir'),
    CompanyBoard('Netlify', 'netlify'),
    CompanyBoard('Miro', 'miro'),
    CompanyBoard('Airtable', 'airtable'),
    CompanyBoard('Zapier', 'zapier'),
    CompanyBoard('Superhuman', 'superhuman'),
    CompanyBoard('Pitch', 'pitch'),
    CompanyBoard('Descript', 'descript'),
    CompanyBoard('Lucid', 'lucid'),
    CompanyBoard('Sentry', 'sentry'),
]

ASHBY_BOARDS: List[CompanyBoard] = [
    CompanyBoard('OpenAI', 'openai'),
    CompanyBoard('Cohere', 'cohere'),
    CompanyBoard('Perplexity', 'perplexity'),
    CompanyBoard('Glean', 'glean'),
    CompanyBoard('Writer', 'writer'),
    CompanyBoard('Vercel', 'vercel'),
    CompanyBoard('Supabase', 'supabase'),
    CompanyBoard('Railway', 'railway'),
    CompanyBoard('Neon', 'neon'),
    CompanyBoard('Resend', 'resend'),
    CompanyBoard('Mercury', 'mercury'),
    CompanyBoard('Ramp', 'ramp'),
    CompanyBoard('Vanta', 'vanta'),
]
