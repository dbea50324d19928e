"""Known configuration keys, their defaults and help text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple, Union

SettingValue = Union[str, bool, int]

VALID_BOXES = ("cpu", "mem", "net", "proc")
VALID_GRAPH_SYMBOLS = ("braille", "block", "tty")
VALID_GRAPH_SYMBOLS_DEF = ("default",) + VALID_GRAPH_SYMBOLS
TEMP_SCALES = ("celsius", "fahrenheit", "kelvin", "rankine")

DEFAULT_PRESET = "cpu:0:default,mem:0:default,net:0:default,proc:0:default"


@dataclass(frozen=True)
class SchemaEntry:
    """A documented setting."""

    key: str
    help_text: str
    default: SettingValue

    @property
    def kind(self) -> type:
        # bool before int: bool is a subclass of int.
        if isinstance(self.default, bool):
            return bool
        if isinstance(self.default, int):
            return int
        return str


_ENTRIES: Tuple[SchemaEntry, ...] = (
    SchemaEntry(
        "color_theme",
        '#* Name of a sysmon formatted ".theme" file, "Default" and "TTY" for builtin themes.\n'
        '#* Themes should be placed in "../share/sysmon/themes" relative to binary or '
        '"$HOME/.config/sysmon/themes"',
        "Default",
    ),
    SchemaEntry(
        "theme_background",
        "#* If the theme set background should be shown, set to False if you want terminal "
        "background transparency.",
        True,
    ),
    SchemaEntry(
        "truecolor",
        "#* Sets if 24-bit truecolor should be used, will convert 24-bit colors to 256 color "
        "(6x6x6 color cube) if false.",
        True,
    ),
    SchemaEntry(
        "force_tty",
        "#* Set to true to force tty mode regardless if a real tty has been detected or not.\n"
        "#* Will force 16-color mode and TTY theme, set all graph symbols to \"tty\" and swap "
        "out other non tty friendly symbols.",
        False,
    ),
    SchemaEntry(
        "presets",
        "#* Define presets for the layout of the boxes. Preset 0 is always all boxes shown with "
        "default settings. Max 9 presets.\n"
        "#* Format: \"box_name:P:G,box_name:P:G\" P=(0 or 1) for alternate positions, "
        "G=graph symbol to use for box.\n"
        "#* Use whitespace \" \" as separator between different presets.\n"
        "#* Example: \"cpu:0:default,mem:0:tty,proc:1:default cpu:0:braille,proc:0:tty\"",
        "cpu:1:default,proc:0:default cpu:0:default,mem:0:default,net:0:default "
        "cpu:0:block,net:0:tty",
    ),
    SchemaEntry(
        "rounded_corners",
        "#* Rounded corners on boxes, is ignored if TTY mode is ON.",
        True,
    ),
    SchemaEntry(
        "graph_symbol",
        "#* Default symbols to use for graph creation, \"braille\", \"block\" or \"tty\".\n"
        "#* \"braille\" offers the highest resolution but might not be included in all fonts.\n"
        "#* \"block\" has half the resolution of braille but uses more common characters.\n"
        "#* \"tty\" uses only 3 different symbols but will work with most fonts and should "
        "work in a real TTY.",
        "braille",
    ),
    SchemaEntry(
        "graph_symbol_cpu",
        "#* Graph symbol to use for graphs in cpu box, \"default\", \"braille\", \"block\" or \"tty\".",
        "default",
    ),
    SchemaEntry(
        "graph_symbol_mem",
        "#* Graph symbol to use for graphs in mem box, \"default\", \"braille\", \"block\" or \"tty\".",
        "default",
    ),
    SchemaEntry(
        "graph_symbol_net",
        "#* Graph symbol to use for graphs in net box, \"default\", \"braille\", \"block\" or \"tty\".",
        "default",
    ),
    SchemaEntry(
        "graph_symbol_proc",
        "#* Graph symbol to use for graphs in proc box, \"default\", \"braille\", \"block\" or \"tty\".",
        "default",
    ),
    SchemaEntry(
        "shown_boxes",
        "#* Manually set which boxes to show. Available values are \"cpu mem net proc\", "
        "separate values with whitespace.",
        "cpu mem net proc",
    ),
    SchemaEntry(
        "update_ms",
        "#* Update time in milliseconds, recommended 2000 ms or above for better sample times "
        "for graphs.",
        2000,
    ),
    SchemaEntry(
        "proc_sorting",
        "#* Processes sorting, \"pid\" \"program\" \"arguments\" \"threads\" \"user\" \"memory\" "
        "\"cpu lazy\" \"cpu direct\",\n"
        "#* \"cpu lazy\" sorts top process over time (easier to follow), \"cpu direct\" updates "
        "top process directly.",
        "cpu lazy",
    ),
    SchemaEntry("proc_reversed", "#* Reverse sorting order, True or False.", False),
    SchemaEntry(
        "proc_tree",
        "#* Show processes as a tree.",
        False,
    ),
    SchemaEntry(
        "proc_colors",
        "#* Use the cpu graph colors in the process list.",
        True,
    ),
    SchemaEntry(
        "proc_gradient",
        "#* Use a darkening gradient in the process list.",
        True,
    ),
    SchemaEntry(
        "proc_per_core",
        "#* If process cpu usage should be of the core it's running on or usage of the total "
        "available cpu power.",
        False,
    ),
    SchemaEntry(
        "proc_mem_bytes",
        "#* Show process memory as bytes instead of percent.",
        True,
    ),
    SchemaEntry(
        "proc_info_smaps",
        "#* Use /proc/[pid]/smaps for memory information in the process info box (very slow "
        "but more accurate)",
        False,
    ),
    SchemaEntry(
        "proc_left",
        "#* Show proc box on left side of screen instead of right.",
        False,
    ),
    SchemaEntry(
        "cpu_graph_upper",
        "#* Sets the CPU stat shown in upper half of the CPU graph, \"total\" is always "
        "available.\n"
        "#* Select from a list of detected attributes from the options menu.",
        "total",
    ),
    SchemaEntry(
        "cpu_graph_lower",
        "#* Sets the CPU stat shown in lower half of the CPU graph, \"total\" is always "
        "available.\n"
        "#* Select from a list of detected attributes from the options menu.",
        "total",
    ),
    SchemaEntry(
        "cpu_invert_lower",
        "#* Toggles if the lower CPU graph should be inverted.",
        True,
    ),
    SchemaEntry(
        "cpu_single_graph",
        "#* Set to True to completely disable the lower CPU graph.",
        False,
    ),
    SchemaEntry(
        "cpu_bottom",
        "#* Show cpu box at bottom of screen instead of top.",
        False,
    ),
    SchemaEntry(
        "show_uptime",
        "#* Shows the system uptime in the CPU box.",
        True,
    ),
    SchemaEntry(
        "check_temp",
        "#* Show cpu temperature.",
        True,
    ),
    SchemaEntry(
        "cpu_sensor",
        "#* Which sensor to use for cpu temperature, use options menu to select from list of "
        "available sensors.",
        "Auto",
    ),
    SchemaEntry(
        "show_coretemp",
        "#* Show temperatures for cpu cores also if check_temp is True and sensors has been "
        "found.",
        True,
    ),
    SchemaEntry(
        "cpu_core_map",
        "#* Set a custom mapping between core and coretemp, can be needed on certain cpus to "
        "get correct temperature for correct core.\n"
        "#* Use lm-sensors or similar to see which cores are reporting temperatures on your "
        "machine.\n"
        "#* Format \"x:y\" x=core with wrong temp, y=core with correct temp, use space as "
        "separator between multiple entries.\n"
        "#* Example: \"4:0 5:1 6:3\"",
        "",
    ),
    SchemaEntry(
        "temp_scale",
        "#* Which temperature scale to use, available values: \"celsius\", \"fahrenheit\", "
        "\"kelvin\" and \"rankine\".",
        "celsius",
    ),
    SchemaEntry(
        "show_cpu_freq",
        "#* Show CPU frequency.",
        True,
    ),
    SchemaEntry(
        "clock_format",
        "#* Draw a clock at top of screen, formatting according to strftime, empty string to "
        "disable.\n"
        "#* Special formatting: /host = hostname | /user = username | /uptime = system uptime",
        "%X",
    ),
    SchemaEntry(
        "background_update",
        "#* Update main ui in background when menus are showing, set this to false if the "
        "menus is flickering too much for comfort.",
        True,
    ),
    SchemaEntry(
        "custom_cpu_name",
        "#* Custom cpu model name, empty string to disable.",
        "",
    ),
    SchemaEntry(
        "disks_filter",
        "#* Optional filter for shown disks, should be full path of a mountpoint, separate "
        "multiple values with whitespace \" \".\n"
        "#* Begin line with \"exclude=\" to change to exclude filter, otherwise defaults to "
        "\"most include\" filter. Example: disks_filter=\"exclude=/boot /home/user\".",
        "",
    ),
    SchemaEntry(
        "mem_graphs",
        "#* Show graphs instead of meters for memory values.",
        True,
    ),
    SchemaEntry(
        "mem_below_net",
        "#* Show mem box below net box instead of above.",
        False,
    ),
    SchemaEntry(
        "show_swap",
        "#* If swap memory should be shown in memory box.",
        True,
    ),
    SchemaEntry(
        "swap_disk",
        "#* Show swap as a disk, ignores show_swap value above, inserts itself after first "
        "disk.",
        True,
    ),
    SchemaEntry(
        "show_disks",
        "#* If mem box should be split to also show disks info.",
        True,
    ),
    SchemaEntry(
        "only_physical",
        "#* Filter out non physical disks. Set this to False to include network disks, RAM "
        "disks and similar.",
        True,
    ),
    SchemaEntry(
        "use_fstab",
        "#* Read disks list from /etc/fstab. This also disables only_physical.",
        False,
    ),
    SchemaEntry(
        "show_io_stat",
        "#* Toggles if io activity % (disk busy time) should be shown in regular disk usage "
        "view.",
        True,
    ),
    SchemaEntry(
        "io_mode",
        "#* Toggles io mode for disks, showing big graphs for disk read/write speeds.",
        False,
    ),
    SchemaEntry(
        "io_graph_combined",
        "#* Set to True to show combined read/write io graphs in io mode.",
        False,
    ),
    SchemaEntry(
        "io_graph_speeds",
        "#* Set the top speed for the io graphs in MiB/s (100 by default), use format "
        "\"mountpoint:speed\" separate disks with whitespace \" \".\n"
        "#* Example: \"/mnt/media:100 /:20 /boot:1\".",
        "",
    ),
    SchemaEntry(
        "net_download",
        "#* Set fixed values for network graphs in Mebibits. Is only used if net_auto is also "
        "set to False.",
        100,
    ),
    SchemaEntry(
        "net_upload",
        "#* Fixed upload scale for the network graph in Mebibits, see net_download.",
        100,
    ),
    SchemaEntry(
        "net_auto",
        "#* Use network graphs auto rescaling mode, ignores any values set above and rescales "
        "down to 10 Kibibytes at the lowest.",
        True,
    ),
    SchemaEntry(
        "net_sync",
        "#* Sync the auto scaling for download and upload to whichever currently has the "
        "highest scale.",
        False,
    ),
    SchemaEntry(
        "net_iface",
        "#* Starts with the Network Interface specified here.",
        "",
    ),
    SchemaEntry(
        "show_battery",
        "#* Show battery stats in top right if battery is present.",
        True,
    ),
    SchemaEntry(
        "log_level",
        "#* Set loglevel for \"~/.config/sysmon/sysmon.log\" levels are: \"ERROR\" "
        "\"WARNING\" \"INFO\" \"DEBUG\".\n"
        "#* The level set includes all lower levels, i.e. \"DEBUG\" will show all logging "
        "info.",
        "WARNING",
    ),
)


class SchemaTable:
    """Immutable allowlist of documented setting names."""

    def __init__(self, entries: Tuple[SchemaEntry, ...] = _ENTRIES) -> None:
        self._entries: Dict[str, SchemaEntry] = {}
        for entry in entries:
            if entry.key in self._entries:
                raise ValueError(f"duplicate schema entry: {entry.key}")
            self._entries[entry.key] = entry

    def is_known(self, key: str) -> bool:
        return key in self._entries

    def describe(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        return entry.help_text if entry is not None else None

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[SchemaEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def defaults_for(self, kind: type) -> Dict[str, SettingValue]:
        """Default values of every entry whose declared type is `kind`."""

        return {entry.key: entry.default for entry in self._entries.values() if entry.kind is kind}


DEFAULT_SCHEMA = SchemaTable()
