"""
German prompt templates for rewriting radiology reports.

The model only ever sees redacted text, so every prompt tells it to carry
placeholder tokens through unchanged.
"""

from typing import Optional, Tuple

from ..schemas.rewrite import RewriteOptions

SYSTEM_PROMPT = """Du bist ein hochspezialisierter Sprach- und Stildienst für radiologische Befunde.

WICHTIGE REGELN:
- Du fügst KEINE neuen medizinischen Inhalte hinzu
- Du änderst KEINE Zahlen, Einheiten, Messwerte, Seitenangaben oder Serien-/Bildnummern
- Du vereinheitlichst Terminologie nach deutscher Fachsprache
- Du schreibst prägnant und vermeidest leere Füllwörter
- Antworte ausschließlich mit dem optimierten Text (ohne Kommentare oder Zusatzzeichen)
- Fehlen Angaben, schreibe wörtlich: [keine Angabe]

MEDIZINISCHE PRÄZISION:
- Verwende korrekte anatomische Terminologie
- Halte dich an etablierte radiologische Standards
- Berücksichtige die klinische Relevanz der Befunde"""

PLACEHOLDER_RULE = """PLATZHALTER:
Der Text enthält anonymisierte Platzhalter wie [EMAIL_0], [DATE_3] oder [PATIENT_NAME_1].
Übernimm jeden Platzhalter exakt und unverändert (Schreibweise, Klammern, Nummer).
Erfinde keine neuen Platzhalter und ersetze keinen Platzhalter durch eigenen Text."""

LEVEL_PROMPTS = {
    "1": """OPTION 1 - SPRACHLICHE & GRAMMATIKALISCHE KORREKTUR (IMMER AKTIV):
Korrigiere ausschließlich Rechtschreibung, Grammatik, Zeichensetzung und offensichtliche Tippfehler.
- Alle medizinischen Inhalte, Zahlen, Messwerte, Einheiten und Lateralisierung (links/rechts) bleiben exakt unverändert
- Keine Terminologie-Änderungen, keine Strukturänderungen
- Behalte den ursprünglichen Stil und die Ansprache bei""",
    "2": """OPTION 2 - TERMINOLOGIE VERBESSERN, STRUKTUR BLEIBT:
Wie Option 1, zusätzlich:
- Vereinheitliche radiologische Fachterminologie nach deutscher Standardsprache (RadLex-orientiert)
- Verwende konsistente Abkürzungen (z.B. i.v., KM, CT, MRT)
- Verbessere medizinische Begriffe, aber behalte die ursprüngliche Struktur bei""",
    "3": """OPTION 3 - TERMINOLOGIE + UMSTRUKTURIERUNG (OBERARZT-NIVEAU) + KURZE BEURTEILUNG:
Wie Option 2, zusätzlich:
- Strukturiere den Befund professionell um (Klinische Fragestellung → Technik → Befund → Beurteilung)
- Verwende präzise, fachsprachlich korrekte Formulierungen auf Oberarzt-Niveau
- Erstelle eine prägnante, medizinisch fundierte Beurteilung basierend auf den Befunden""",
    "4": """OPTION 4 - KLINISCHE EMPFEHLUNG HINZUFÜGEN (OPTIONAL):
Wie Option 3, zusätzlich:
- Füge klinisch relevante Empfehlungen hinzu, wenn medizinisch sinnvoll
- Empfehlungen sollen evidenzbasiert und praxisrelevant sein
- Formuliere konkrete, umsetzbare Handlungsempfehlungen""",
    "5": """OPTION 5 - ZUSATZINFOS/DIFFERENTIALDIAGNOSEN (OPTIONAL):
Wie Option 4, zusätzlich:
- Ergänze relevante Differentialdiagnosen, wenn klinisch sinnvoll
- Füge wichtige Zusatzinformationen zur Befundinterpretation hinzu
- Berücksichtige aktuelle Leitlinien und Evidenz""",
}

LAYOUTS = {
    "standard": "Formatiere den Text im klassischen radiologischen Befundformat mit klarer Struktur.",
    "strukturiert": "Gliedere den Text nach Organsystemen und verwende klare Abschnitte mit Überschriften.",
    "tabellarisch": "Formatiere wichtige Befunde in übersichtlicher Tabellenform oder als strukturierte Aufzählung.",
    "konsiliar": "Erstelle eine kompakte, überweisungsgerechte Kurzfassung mit den wichtigsten Befunden.",
}

STYLE_PROMPTS = {
    "knapp": "STIL: Formuliere knapp und telegrammartig.",
    "neutral": "",
    "ausführlicher": "STIL: Formuliere ausführlicher in ganzen Sätzen.",
}

ADDRESS_PROMPTS = {
    "sie": "ANSPRACHE: Sprich zuweisende Kolleginnen und Kollegen in der Sie-Form an.",
    "neutral": "",
}

STRUCTURED_PROMPT = """STRUKTURIERTE AUSGABE:
Erstelle eine strukturierte Ausgabe basierend auf den aktivierten Optionen:

BEFUND:
[Der optimierte Befundtext - immer vorhanden]

BEURTEILUNG:
[Prägnante medizinische Beurteilung - nur wenn Option 3, 4 oder 5 aktiv]

EMPFEHLUNGEN:
[Klinisch relevante Empfehlungen - nur wenn Option 4 oder 5 aktiv und medizinisch sinnvoll]

ZUSATZINFORMATIONEN:
[Differentialdiagnosen und Zusatzinfos - nur wenn Option 5 aktiv und medizinisch wertvoll]

WICHTIG: Erstelle nur die Abschnitte, die den aktivierten Optionen entsprechen."""

CLOSING_RULE = (
    "WICHTIG: Keine neuen Diagnosen/Befunde/Therapieempfehlungen. "
    "Keine Zahlenänderungen. Keine Lateralisierungsänderungen. "
    "Alle Platzhalter in eckigen Klammern bleiben unverändert."
)


def is_custom_template(layout: str) -> bool:
    """Layouts with bracketed sections are templates, anything else is a name."""
    return "[" in layout and "]" in layout


class PromptBuilder:
    """Builds the system and user prompt for one rewrite request."""

    def __init__(self, system_prompt: str = SYSTEM_PROMPT):
        self.system_prompt = system_prompt

    def build_system_prompt(self) -> str:
        return f"{self.system_prompt}\n\n{PLACEHOLDER_RULE}"

    @staticmethod
    def level_prompt(mode: str) -> str:
        return LEVEL_PROMPTS.get(mode, LEVEL_PROMPTS["1"])

    @staticmethod
    def layout_prompt(layout: Optional[str]) -> str:
        if not layout:
            return ""
        if is_custom_template(layout):
            return (
                "LAYOUT-TEMPLATE:\n"
                "Verwende das folgende Template exakt für die Formatierung:\n"
                f"{layout}\n\n"
                "Ersetze die Platzhalter:\n"
                "- [BEFUND] → Der optimierte Befundtext\n"
                "- [BEURTEILUNG] → Die medizinische Beurteilung (falls aktiviert)\n"
                "- [EMPFEHLUNGEN] → Klinische Empfehlungen (falls aktiviert)\n"
                "- [ZUSATZINFOS] → Zusatzinformationen/Differentialdiagnosen (falls aktiviert)"
            )
        return f"LAYOUT-ANFORDERUNG: {LAYOUTS.get(layout, LAYOUTS['standard'])}"

    def build_user_prompt(self, redacted_text: str, options: RewriteOptions) -> str:
        """
        Assemble the task description around the redacted report.

        Empty sections (no layout, neutral style) are left out entirely.
        """
        sections = [
            f"AUFGABE:\n{self.level_prompt(options.mode)}",
            self.layout_prompt(options.layout),
            STRUCTURED_PROMPT if options.include_recommendations else "",
            STYLE_PROMPTS.get(options.style, ""),
            ADDRESS_PROMPTS.get(options.address, ""),
            f"TEXT ZU OPTIMIEREN:\n---\n{redacted_text}\n---",
            CLOSING_RULE,
        ]
        return "\n\n".join(section for section in sections if section)

    def build(self, redacted_text: str, options: RewriteOptions) -> Tuple[str, str]:
        """Return (system_prompt, user_prompt)."""
        return self.build_system_prompt(), self.build_user_prompt(redacted_text, options)
