"""Receipt settings.

Every setting is declared once here as a ConfigItem.  The declaration
knows the setting's key, default, type and a description for people
editing settings files.  Settings files are TOML; the [receipt] table
holds ReceiptSettings values and the [layout] table holds the line
width and brand name.
"""

from . import cmdline
from . import models
from . import paper
from .models import ReceiptSettings
import sys
import tomli

import logging
log = logging.getLogger(__name__)

# Config items must always have a valid value.  A value that can't be
# converted is treated as missing (None), and a missing value is
# replaced by the default unless the item allows None.


class ConfigError(Exception):
    def __init__(self, desc):
        self.desc = desc

    def __str__(self):
        return f"ConfigError('{self.desc}')"


def _camel(name):
    first, *rest = name.split("_")
    return first + "".join(w.capitalize() for w in rest)


class ConfigItem:
    """A text setting

    Empty text is treated as no value.
    """
    _keys = {}

    def __init__(self, key, default, type="text",
                 display_name=None, description=None, allow_none=False):
        self.key = key
        self.section, _, self.name = key.partition(':')
        # The same setting as named by the back office API
        self.api_name = _camel(self.name)
        self.default = default
        self.type = type
        self.display_name = display_name or key
        self.description = description or self.display_name
        self._allow_none = allow_none
        self._keys[self.key] = self

        rt = self.from_text(self.to_text(self.default))
        if rt is None and not allow_none:
            raise Exception("ConfigItem default round-trips to None, but "
                            "allow_none is not set")
        if rt != self.default:
            raise Exception("ConfigItem default does not survive "
                            "text round-trip")

    @classmethod
    def from_text(cls, s):
        """Convert a string from a settings file to the appropriate type
        """
        return s if s else None

    @classmethod
    def to_text(cls, v):
        """Convert a python value to a string for a settings file
        """
        if v is None:
            return ""
        return str(v)

    def value_from(self, raw):
        """The value of this setting given a raw value from a settings file

        TOML gives us native booleans and integers as well as strings;
        those are converted through their text form.
        """
        if raw is None:
            v = None
        else:
            v = self.from_text(raw if isinstance(raw, str)
                               else self.to_text(raw))
            if v is None and raw != "":
                log.warning("Invalid value %r for %s; using %s",
                            raw, self.key,
                            "no value" if self._allow_none
                            else repr(self.default))
        if v is None:
            return None if self._allow_none else self.default
        return v

    @classmethod
    def items(cls, section):
        return [ci for ci in cls._keys.values() if ci.section == section]

    def __str__(self):
        return self.key


class MultiLineConfigItem(ConfigItem):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, type="multiline text", **kwargs)


class ChoiceConfigItem(ConfigItem):
    def __init__(self, key, default, choices, **kwargs):
        self.choices = tuple(choices)
        super().__init__(key, default, type="choice", **kwargs)

    def from_text(self, s):
        s = s.strip()
        if s in self.choices:
            return s
        if s.upper() in self.choices:
            return s.upper()


class PositiveIntConfigItem(ConfigItem):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, type="positive integer", **kwargs)

    @classmethod
    def from_text(cls, s):
        try:
            r = int(s)
            if r < 1:
                raise ValueError("Expected a positive integer")
            return r
        except Exception:
            return


class BooleanConfigItem(ConfigItem):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, type="boolean", **kwargs)

    @classmethod
    def from_text(cls, s):
        if not s:
            return
        return s[0] in ('y', 'Y', 't', 'T')

    @classmethod
    def to_text(cls, v):
        return "Yes" if v else "" if v is None else "No"


print_language = ChoiceConfigItem(
    'receipt:print_language', models.MAIN_LOCALIZED,
    choices=models.print_languages, display_name="Print language",
    description="Which product names to print: MAIN_LOCALIZED, "
    "MAIN_ONLY or LOCALIZED_ONLY")
main_language = ConfigItem(
    'receipt:main_language', "en", display_name="Main language",
    description="Language code of the main product names")
localized_language = ConfigItem(
    'receipt:localized_language', "ar", allow_none=True,
    display_name="Localized language",
    description="Language code of the localized product names")
receipt_header = MultiLineConfigItem(
    'receipt:receipt_header', None, allow_none=True,
    display_name="Receipt header",
    description="Text printed, centred, under the invoice title")
receipt_footer = MultiLineConfigItem(
    'receipt:receipt_footer', None, allow_none=True,
    display_name="Receipt footer",
    description="Text printed, centred, above the closing thank you")
invoice_title = ConfigItem(
    'receipt:invoice_title', models.default_invoice_title,
    allow_none=True, display_name="Invoice title",
    description="Title printed under the branch name")

show_order_number = BooleanConfigItem(
    'receipt:show_order_number', True, display_name="Show order number?",
    description="Should the order number be printed?")
show_calories = BooleanConfigItem(
    'receipt:show_calories', False, display_name="Show calories?",
    description="Should item calories be printed?")
show_subtotal = BooleanConfigItem(
    'receipt:show_subtotal', True, display_name="Show subtotal?",
    description="Should the subtotal be printed?")
show_rounding = BooleanConfigItem(
    'receipt:show_rounding', False, display_name="Show rounding?",
    description="Should a non-zero rounding adjustment be printed?")
show_closer_username = BooleanConfigItem(
    'receipt:show_closer_username', False,
    display_name="Show closed by?",
    description="Should the name of the user who closed the order be "
    "printed?")
show_creator_username = BooleanConfigItem(
    'receipt:show_creator_username', False,
    display_name="Show created by?",
    description="Should the name of the user who created the order be "
    "printed?")
show_check_number = BooleanConfigItem(
    'receipt:show_check_number', True, display_name="Show check number?",
    description="Should the check number be printed, when there is one?")
hide_free_modifier_options = BooleanConfigItem(
    'receipt:hide_free_modifier_options', False,
    display_name="Hide free modifiers?",
    description="Should modifiers with no price be left off the receipt?")
print_customer_phone_in_pickup = BooleanConfigItem(
    'receipt:print_customer_phone_in_pickup', False,
    display_name="Print customer phone on pickup orders?",
    description="Should the customer's phone number be printed on pickup "
    "orders?")

width = PositiveIntConfigItem(
    'layout:width', None, allow_none=True, display_name="Line width",
    description="Characters per line; overrides the paper size")
paper_size = ChoiceConfigItem(
    'layout:paper', paper.default_paper, choices=paper.papers,
    display_name="Paper size",
    description=f"Paper size: one of {', '.join(paper.papers)}")
brand_name = ConfigItem(
    'layout:brand_name', "SADI", display_name="Brand name",
    description="Name printed at the top of every receipt")


def _table_values(section, table, what):
    """Convert a table from a settings file using the items in section

    Returns a dict of item name to value for the keys present in the
    table.  Keys may be given as the item name or as its API name.
    """
    byname = {}
    for ci in ConfigItem.items(section):
        byname[ci.name] = ci
        byname[ci.api_name] = ci
    values = {}
    for k, raw in (table or {}).items():
        ci = byname.get(k)
        if ci is None:
            log.warning("Unknown %s setting '%s'", what, k)
            continue
        values[ci.name] = ci.value_from(raw)
    return values


def settings_from_table(table):
    """Build ReceiptSettings from a mapping of setting names to values

    Settings that aren't present take their defaults.
    """
    return ReceiptSettings(**_table_values("receipt", table, "receipt"))


def layout_from_table(table):
    """Work out the line width and brand name from a [layout] table

    An explicit width wins over the paper size.  Returns a dict with
    keys 'width' and 'brand_name'.
    """
    values = _table_values("layout", table, "layout")
    w = values.get("width")
    if w is None:
        w = paper.width_for_paper(values.get("paper", paper_size.default))
    return {
        'width': w,
        'brand_name': values.get("brand_name", brand_name.default),
    }


def read_settings_file(path):
    """Read a TOML settings file

    Returns (ReceiptSettings, layout dict).  Raises ConfigError if the
    file can't be read or isn't valid TOML.
    """
    log.info("reading settings %s", path)
    try:
        with open(path, "rb") as f:
            d = tomli.load(f)
    except OSError as e:
        raise ConfigError(f"{path}: {e.strerror}")
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}")
    receipt = d.get("receipt", {})
    layout = d.get("layout", {})
    if not isinstance(receipt, dict) or not isinstance(layout, dict):
        raise ConfigError(f"{path}: [receipt] and [layout] must be tables")
    return settings_from_table(receipt), layout_from_table(layout)


class settings_cmd(cmdline.command):
    command = "settings"
    help = "list the receipt settings that can be configured"

    @staticmethod
    def add_arguments(parser):
        parser.add_argument(
            "key", nargs="?", help="setting to describe, "
            "eg. receipt:show_subtotal")

    @staticmethod
    def run(args):
        if not args.key:
            for ci in ConfigItem._keys.values():
                print(f"{ci.key}: {ci.display_name}: "
                      f"{ci.to_text(ci.default)}")
            return
        cf = ConfigItem._keys.get(args.key)
        if not cf:
            print(f"Setting {args.key} does not exist", file=sys.stderr)
            return 1
        print(f"Key: {cf.key}")
        print(f"Name: {cf.display_name}")
        print(f"Description: {cf.description}")
        print(f"Type: {cf.type}")
        print(f"Settings file name: {cf.name} or {cf.api_name}")
        print(f"Default value: {cf.to_text(cf.default)}")
