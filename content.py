"""
Display-only content (About page) with built-in defaults.

``fill_defaults`` turns whatever the content API returned (or nothing) into
fully populated dataclasses, so screens never check for missing keys.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence
from errors import ApiError
from logger import log

MAX_KEY_MILESTONES = 6


@dataclass(frozen=True)
class ImpactMetrics:
    farmers: int = 100000
    villages: int = 1250
    programs: int = 45
    states: int = 18

    def as_dict(self) -> dict:
        return {
            "farmers": self.farmers,
            "villages": self.villages,
            "programs": self.programs,
            "states": self.states,
        }


@dataclass(frozen=True)
class CommunityStats:
    success_stories: int = 850
    satisfaction_rate: int = 92
    income_increase: int = 45


@dataclass(frozen=True)
class Testimonial:
    quote: str
    author: str
    role: str = ""
    impact: str = ""
    hindi_quote: Optional[str] = None
    hindi_author: Optional[str] = None
    hindi_role: Optional[str] = None
    hindi_impact: Optional[str] = None


@dataclass(frozen=True)
class Milestone:
    year: int
    title: str
    description: str = ""


@dataclass(frozen=True)
class AboutContent:
    impact_metrics: ImpactMetrics = field(default_factory=ImpactMetrics)
    community_stats: CommunityStats = field(default_factory=CommunityStats)
    testimonials: List[Testimonial] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)
    from_defaults: bool = True


DEFAULT_TESTIMONIALS = [
    Testimonial(
        quote=("Kisan Andolan has transformed our village's approach to agriculture. "
               "The training on water conservation techniques helped us increase crop "
               "yields by 40% while using less water."),
        hindi_quote=("किसान आंदोलन ने हमारे गांव के कृषि दृष्टिकोण को बदल दिया है। जल संरक्षण "
                     "तकनीकों पर प्रशिक्षण ने हमें कम पानी का उपयोग करके फसल उपज को 40% तक "
                     "बढ़ाने में मदद की।"),
        author="Ramesh Patel", hindi_author="रमेश पटेल",
        role="Farmer, Gujarat", hindi_role="किसान, गुजरात",
        impact="40% increase in crop yields", hindi_impact="फसल उपज में 40% की वृद्धि",
    ),
    Testimonial(
        quote=("The Women in Agriculture program gave me leadership training that helped "
               "me start a cooperative with 15 other women farmers in my village. Now we "
               "negotiate better prices and support each other."),
        hindi_quote=("कृषि में महिलाओं के कार्यक्रम ने मुझे नेतृत्व प्रशिक्षण दिया, जिससे मैंने अपने "
                     "गांव में 15 अन्य महिला किसानों के साथ एक सहकारी शुरू की। अब हम बेहतर "
                     "कीमतों पर बातचीत करते हैं।"),
        author="Lakshmi Devi", hindi_author="लक्ष्मी देवी",
        role="Cooperative Leader, Tamil Nadu", hindi_role="सहकारी नेता, तमिलनाडु",
        impact="Founded a 15-member women's cooperative",
        hindi_impact="15 सदस्यीय महिला सहकारी की स्थापना की",
    ),
    Testimonial(
        quote=("The organic certification assistance was invaluable. Our income has "
               "increased by 65% since transitioning to certified organic farming."),
        hindi_quote=("जैविक प्रमाणीकरण सहायता अमूल्य थी। प्रमाणित जैविक खेती में संक्रमण के बाद "
                     "से हमारी आय 65% बढ़ गई है।"),
        author="Surinder Singh", hindi_author="सुरिंदर सिंह",
        role="Organic Farmer, Punjab", hindi_role="जैविक किसान, पंजाब",
        impact="65% income increase through organic certification",
        hindi_impact="जैविक प्रमाणीकरण के माध्यम से 65% आय वृद्धि",
    ),
    Testimonial(
        quote=("I joined the Youth Leadership Program at 22. Three years later I run an "
               "agri-tech startup that helps small farmers access weather forecasts."),
        hindi_quote=("मैंने 22 साल की उम्र में यूथ लीडरशिप प्रोग्राम ज्वाइन किया। तीन साल बाद मैं "
                     "एक कृषि-टेक स्टार्टअप चला रहा हूं जो छोटे किसानों को मौसम पूर्वानुमान देता है।"),
        author="Arjun Mehta", hindi_author="अर्जुन मेहता",
        role="Agri-Tech Entrepreneur, Maharashtra", hindi_role="कृषि-टेक उद्यमी, महाराष्ट्र",
        impact="Founded a successful agri-tech startup",
        hindi_impact="एक सफल कृषि-टेक स्टार्टअप की स्थापना की",
    ),
]

DEFAULT_MILESTONES = [
    Milestone(2003, "Foundation", "Kisan Andolan founded in Uttar Pradesh"),
    Milestone(2007, "First Training Center", "Opened our first farmer training center in Lucknow"),
    Milestone(2012, "National Expansion", "Expanded operations to 8 states across India"),
    Milestone(2015, "Policy Influence", "Advocated for changes to the national agricultural policy"),
    Milestone(2018, "Sustainability Initiative", "Launched a program for sustainable farming practices"),
    Milestone(2023, "Digital Transformation", "Implemented digital platforms to reach 100,000+ farmers"),
]


def _int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _metrics(raw: Any) -> ImpactMetrics:
    base = ImpactMetrics()
    if not isinstance(raw, Mapping):
        return base
    return replace(
        base,
        **{k: _int(raw.get(k), getattr(base, k)) for k in base.as_dict() if k in raw},
    )


def _community(raw: Any) -> CommunityStats:
    base = CommunityStats()
    if not isinstance(raw, Mapping):
        return base
    return CommunityStats(
        success_stories=_int(raw.get("successStories"), base.success_stories),
        satisfaction_rate=_int(raw.get("satisfactionRate"), base.satisfaction_rate),
        income_increase=_int(raw.get("incomeIncrease"), base.income_increase),
    )


def _testimonial(raw: Mapping[str, Any]) -> Optional[Testimonial]:
    quote, author = raw.get("quote"), raw.get("author")
    if not quote or not author:
        return None
    return Testimonial(
        quote=str(quote), author=str(author),
        role=str(raw.get("role") or ""), impact=str(raw.get("impact") or ""),
        hindi_quote=raw.get("hindi_quote"), hindi_author=raw.get("hindi_author"),
        hindi_role=raw.get("hindi_role"), hindi_impact=raw.get("hindi_impact"),
    )


def _milestone(raw: Mapping[str, Any]) -> Optional[Milestone]:
    title = raw.get("title")
    year = raw.get("year")
    if year is None and raw.get("date"):
        try:
            year = datetime.fromisoformat(str(raw["date"]).replace("Z", "+00:00")).year
        except ValueError:
            year = None
    if not title or year is None:
        return None
    return Milestone(year=_int(year, 0), title=str(title),
                     description=str(raw.get("description") or ""))


def parse_milestones(raw: Any) -> List[Milestone]:
    """API timeline items -> up to six milestones sorted by year; defaults when empty."""
    items = raw if isinstance(raw, Sequence) and not isinstance(raw, str) else []
    parsed = [m for m in (_milestone(i) for i in items if isinstance(i, Mapping)) if m]
    if not parsed:
        return list(DEFAULT_MILESTONES)
    return sorted(parsed, key=lambda m: m.year)[:MAX_KEY_MILESTONES]


def fill_defaults(
    about: Optional[Mapping[str, Any]] = None,
    milestones: Any = None,
) -> AboutContent:
    """Merge API payloads over the built-in defaults. Pure; never raises on bad shapes."""
    about = about if isinstance(about, Mapping) else {}
    raw_testimonials = about.get("testimonials")
    testimonials = []
    if isinstance(raw_testimonials, Sequence) and not isinstance(raw_testimonials, str):
        testimonials = [
            t for t in (_testimonial(r) for r in raw_testimonials if isinstance(r, Mapping)) if t
        ]
    return AboutContent(
        impact_metrics=_metrics(about.get("impactMetrics")),
        community_stats=_community(about.get("communityStats")),
        testimonials=testimonials or list(DEFAULT_TESTIMONIALS),
        milestones=parse_milestones(milestones),
        from_defaults=not about and not milestones,
    )


def filter_milestones(milestones: Sequence[Milestone], query: str) -> List[Milestone]:
    q = (query or "").strip().lower()
    if not q:
        return list(milestones)
    return [
        m for m in milestones
        if q in m.title.lower() or q in m.description.lower() or q in str(m.year)
    ]


class ContentService:
    """Loads About content through the API client, falling back to defaults."""

    def __init__(self, api) -> None:
        self._api = api

    async def load_about(self) -> AboutContent:
        about, milestones = None, None
        try:
            about = await self._api.fetch_about()
        except (ApiError, ValueError) as e:
            log.warning("About content unavailable, using defaults: %s", e)
        try:
            milestones = await self._api.fetch_milestones()
        except (ApiError, ValueError) as e:
            log.warning("Milestones unavailable, using defaults: %s", e)
        return fill_defaults(about, milestones)
