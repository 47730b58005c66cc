# bubblelab/crime_view_model.py - Crime category selection bound to URL state
import logging


logger = logging.getLogger(__name__)

VIOLENT = ["murder", "rape", "robbery", "assault"]
PROPERTY = ["arson", "burglary", "larceny", "vehicle_theft"]
STATE_KEY = "crimes"
SEPARATOR = ";"


class CrimeViewModel:
    """Checkbox state for crime categories, mirrored into the ``crimes`` query parameter."""

    def __init__(self, selected=None):
        self.violent = list(VIOLENT)
        self.property = list(PROPERTY)
        self.crimes = [
            {"crime": self.violent, "type": "violent"},
            {"crime": self.property, "type": "property"},
        ]
        self.crime = []
        for name in selected or []:
            self.toggle(name, True)

    @classmethod
    def from_query_params(cls, query_params):
        raw = query_params.get(STATE_KEY)
        if isinstance(raw, list):
            raw = raw[0] if raw else None
        if not raw:
            return cls()
        names = [name.strip() for name in raw.split(SEPARATOR) if name.strip()]
        model = cls()
        for name in names:
            if name in model.all_crimes():
                model.toggle(name, True)
            else:
                logger.warning("Ignoring unknown crime category in URL: %s", name)
        return model

    @staticmethod
    def capitalize(text):
        return " ".join(t[:1].upper() + t[1:] for t in text.split("_"))

    def all_crimes(self):
        return [name for group in self.crimes for name in group["crime"]]

    def of_type(self, crime_type):
        for index, group in enumerate(self.crimes):
            if group["type"] == crime_type:
                return index
        return -1

    def is_selected(self, name):
        return name in self.crime

    def toggle(self, name, checked):
        if name not in self.all_crimes():
            raise ValueError(f"Unknown crime category: {name}")
        if checked and name not in self.crime:
            self.crime.append(name)
        elif not checked and name in self.crime:
            self.crime.remove(name)

    def push_state(self, query_params):
        if self.crime:
            query_params[STATE_KEY] = SEPARATOR.join(self.crime)
        elif STATE_KEY in query_params:
            del query_params[STATE_KEY]
        return True
