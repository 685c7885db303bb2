# labrc

Tools for the configuration side of a stacking Wayland compositor that uses
Openbox-style settings. The package provides:

- an `rc.xml` reader (`labrc.rcxml`). It fills an `RcConfig`
  (`labrc.rcconfig`) with these settings:
  - fonts, keybinds and mousebinds
  - libinput device categories and usable-area margins
  - snapping regions and window rules
  - window-switcher fields and workspaces

  After reading, built-in defaults are filled in. Later bindings replace
  earlier equal ones, and bindings with no actions are dropped. Invalid
  regions, window rules and actions are removed.
- models for actions (`labrc.action`), keybinds (`labrc.keybind`),
  mousebinds (`labrc.mousebind`) and libinput categories (`labrc.libinput`).
- session helpers (`labrc.session`):
  - apply an `environment` file of `KEY=value` lines, with `$VAR`, `${VAR}`
    and `~` expanded.
  - start an `autostart` script with `sh`.
  - export variables to the dbus and systemd user environments.
- helpers that find the config and theme directories (`labrc.dirs`).
- a helper that runs commands detached through a double fork (`labrc.spawn`).
- a small lexer that lists identifiers in C sources (`labrc.find_idents`).

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install .[test]
```

## Reading a configuration

```python
from labrc.dirs import config_dir
from labrc.rcconfig import RcConfig
from labrc.rcxml import read_config

config = RcConfig(config_dir=config_dir())
read_config(config=config)          # reads <config_dir>/rc.xml

for keybind in config.keybinds:
    print(keybind.modifiers, [action.type.name for action in keybind.actions])
```

`read_config(filename, config)` reads a file you name. It does the same
without a filename if `config.config_dir` is set. A file that is missing or
cannot be read leaves only the defaults.

You can also parse XML from a string. `parse_xml` does not fill in defaults:

```python
from labrc.rcconfig import RcConfig
from labrc.rcxml import parse_xml

config = RcConfig()
parse_xml("<labwc_config><core><gap>10</gap></core></labwc_config>", config)
config.post_process()
config.validate()
```

## Actions

```python
from labrc.action import create_action

action = create_action("MoveToEdge")
action.add_arg_from_xml_node("direction.action", "left")
assert action.is_valid()
```

`create_action` returns `None` in two cases: for the `None` action, and when
no name is given. An unknown name gives an action of type
`ActionType.INVALID`.

## Finding identifiers in C files

```
labrc-find-idents --tokens=malloc,free src/foo.c
```

The command prints each match as `file:line<TAB>identifier`. Without
`--tokens` it prints every identifier that is outside a comment. The exit
status is 1 in two cases: when a listed identifier was found, and when a file
could not be read. To read file names from standard input, one per line, give
`-` in place of the file.

## What this package does not do

This package reads and models configuration only. It is not a compositor:
- It does not display anything and does not handle input devices.
- It does not execute actions on windows. Actions are parsed and validated
  but not run.
- It does not build menus or themes.