"""Professional Role Catalog — the 20 creative professions and how they pair up.

Invariants:
    - Role ids are stable strings (prof_<key>_001) shared with the seed migration
    - Every catalog key has an entry in COMPLEMENTARY_ROLES (possibly empty)
    - A user holds between 1 and 3 professional roles
"""

from dataclasses import dataclass


MIN_ROLES_PER_USER = 1
MAX_ROLES_PER_USER = 3


class ProfessionalCategory:
    FILM_VIDEO = "film_video"
    PERFORMANCE = "performance"
    WRITING = "writing"
    MUSIC = "music"
    VISUAL = "visual"
    DESIGN = "design"
    AUDIO = "audio"


@dataclass(frozen=True)
class ProfessionalRoleSeed:
    key: str
    name: str
    description: str
    icon: str
    category: str

    @property
    def id(self) -> str:
        return f"prof_{self.key}_001"


PROFESSIONAL_ROLES: tuple[ProfessionalRoleSeed, ...] = (
    ProfessionalRoleSeed("director", "Director", "Leads the creative vision of film and video projects", "🎬", ProfessionalCategory.FILM_VIDEO),
    ProfessionalRoleSeed("cinematographer", "Cinematographer", "Shapes the look of a project through camera and light", "🎥", ProfessionalCategory.FILM_VIDEO),
    ProfessionalRoleSeed("video_editor", "Video Editor", "Assembles footage into a finished story", "✂️", ProfessionalCategory.FILM_VIDEO),
    ProfessionalRoleSeed("producer", "Producer", "Brings projects together and keeps them on track", "📋", ProfessionalCategory.FILM_VIDEO),
    ProfessionalRoleSeed("actor", "Actor", "Performs roles on stage and screen", "🎭", ProfessionalCategory.PERFORMANCE),
    ProfessionalRoleSeed("choreographer", "Choreographer", "Designs movement and dance sequences", "💃", ProfessionalCategory.PERFORMANCE),
    ProfessionalRoleSeed("writer", "Writer", "Writes stories, articles and creative prose", "✍️", ProfessionalCategory.WRITING),
    ProfessionalRoleSeed("screenplay_writer", "Screenplay Writer", "Writes scripts for film, TV and stage", "📝", ProfessionalCategory.WRITING),
    ProfessionalRoleSeed("singer", "Singer", "Performs vocals across genres", "🎤", ProfessionalCategory.MUSIC),
    ProfessionalRoleSeed("musician", "Musician", "Plays instruments and performs music", "🎸", ProfessionalCategory.MUSIC),
    ProfessionalRoleSeed("lyricist", "Lyricist", "Writes lyrics for songs", "📜", ProfessionalCategory.MUSIC),
    ProfessionalRoleSeed("composer", "Composer", "Composes original music and scores", "🎼", ProfessionalCategory.MUSIC),
    ProfessionalRoleSeed("photographer", "Photographer", "Captures images for editorial, commercial or art work", "📷", ProfessionalCategory.VISUAL),
    ProfessionalRoleSeed("graphic_designer", "Graphic Designer", "Creates visual identities and layouts", "🎨", ProfessionalCategory.VISUAL),
    ProfessionalRoleSeed("animator", "Animator", "Brings characters and motion graphics to life", "🎞️", ProfessionalCategory.VISUAL),
    ProfessionalRoleSeed("vfx_artist", "VFX Artist", "Builds visual effects and composites", "✨", ProfessionalCategory.VISUAL),
    ProfessionalRoleSeed("art_director", "Art Director", "Directs the visual style of a production", "🖼️", ProfessionalCategory.VISUAL),
    ProfessionalRoleSeed("costume_designer", "Costume Designer", "Designs wardrobe for characters and performers", "👗", ProfessionalCategory.DESIGN),
    ProfessionalRoleSeed("makeup_artist", "Makeup Artist", "Creates looks with makeup and prosthetics", "💄", ProfessionalCategory.DESIGN),
    ProfessionalRoleSeed("sound_designer", "Sound Designer", "Designs soundscapes, effects and mixes", "🎧", ProfessionalCategory.AUDIO),
)

PROFESSIONAL_ROLE_KEYS: frozenset[str] = frozenset(r.key for r in PROFESSIONAL_ROLES)

COMPLEMENTARY_ROLES: dict[str, tuple[str, ...]] = {
    "director": ("cinematographer", "producer", "screenplay_writer", "actor"),
    "actor": ("director", "photographer", "makeup_artist"),
    "writer": ("director", "producer"),
    "screenplay_writer": ("director", "producer"),
    "cinematographer": ("director", "video_editor"),
    "singer": ("musician", "lyricist", "composer"),
    "musician": ("singer", "composer"),
    "lyricist": ("singer", "composer"),
    "composer": ("singer", "musician"),
    "photographer": ("graphic_designer", "art_director"),
    "video_editor": ("director", "vfx_artist", "sound_designer"),
    "producer": (),
    "graphic_designer": (),
    "animator": (),
    "vfx_artist": (),
    "art_director": (),
    "costume_designer": (),
    "makeup_artist": (),
    "choreographer": (),
    "sound_designer": (),
}


def complementary_roles(role_key: str) -> list[str]:
    """Roles a holder of role_key typically collaborates with. Unknown keys → []."""
    return list(COMPLEMENTARY_ROLES.get(role_key, ()))


def check_role_selection(role_ids: list[str]) -> str | None:
    """Selection size rule. Returns error message or None."""
    unique = set(role_ids)
    if not MIN_ROLES_PER_USER <= len(unique) <= MAX_ROLES_PER_USER:
        return "Invalid professional role selection. Please select 1-3 roles."
    return None
