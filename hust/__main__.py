#!/usr/bin/env python3

# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import logging

from hust.internal_types import *

from hust import (
    __version__ as pkg_version,
    Bridge,
    BridgeApiError,
    BridgeFinder,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_DEVICE_TYPE,
  )
from hust.config import UserStore, KeyringUserStore
from hust.util import get_local_ip_addresses_and_interfaces, format_host_and_port

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

def parse_assignment_value(value: str) -> Jsonable:
    """Interprets the right side of a <key>=<value> argument as JSON if possible (e.g., "true", "200"),
       or else as a plain string."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True
    _user_store: Optional[UserStore] = None

    def __init__(self, argv: Optional[Sequence[str]]=None, user_store: Optional[UserStore]=None):
        self._argv = argv
        self._user_store = user_store

    def get_user_store(self) -> UserStore:
        if self._user_store is None:
            self._user_store = KeyringUserStore()
        return self._user_store

    def get_bridge(self) -> Bridge:
        location: str = self._args.location
        return Bridge.from_description_url(location, request_timeout=self._args.request_timeout)

    def get_user(self, bridge: Bridge) -> str:
        user: Optional[str] = self._args.user
        if user is None:
            user = self.get_user_store().find_username(bridge.device.udn)
            if user is None:
                raise CmdExitError(1, f"No username stored for bridge '{bridge.friendly_name}'; run 'hust register' or pass --user")
        return user

    def print_json(self, data: Jsonable) -> None:
        print(json.dumps(data, indent=2, sort_keys=True))
        sys.stdout.flush()

    def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    def cmd_search(self) -> int:
        wait_time: float = self._args.wait_time
        with BridgeFinder(
                timeout=wait_time,
                bind_address=self._args.bind_address,
                multicast_interface=self._args.interface,
                request_timeout=self._args.request_timeout,
              ) as finder:
            for found in finder:
                summary: JsonableDict = {
                    "src_addr": format_host_and_port(found.src_addr),
                    "location": found.location,
                    "bridge": None if found.bridge is None else found.bridge.to_json(),
                    "error": None if found.error is None else str(found.error),
                }
                self.print_json(summary)
        return 0

    def cmd_register(self) -> int:
        bridge = self.get_bridge()
        try:
            username = bridge.register_user(devicetype=self._args.devicetype)
        except BridgeApiError as ex:
            raise CmdExitError(1, f"Registration with '{bridge.friendly_name}' failed (is the link button pressed?): {ex}") from ex
        if self._args.save:
            self.get_user_store().set_username(bridge.device.udn, username)
        print(username)
        return 0

    def cmd_lights(self) -> int:
        bridge = self.get_bridge()
        lights = bridge.get_all_lights(self.get_user(bridge))
        self.print_json({ light_id: light.json_data for light_id, light in lights.items() })
        return 0

    def cmd_set(self) -> int:
        bridge = self.get_bridge()
        user = self.get_user(bridge)
        light: str = self._args.light
        for assignment in self._args.assignments:
            if '=' not in assignment:
                raise CmdExitError(1, f"Expected <key>=<value>, got '{assignment}'")
            key, value = assignment.split('=', 1)
            bridge.modify_light(user, light, key, parse_assignment_value(value))
        return 0

    def cmd_power(self) -> int:
        bridge = self.get_bridge()
        bridge.switch_light(self.get_user(bridge), self._args.light, self._args.state == 'on')
        return 0

    def cmd_interfaces(self) -> int:
        for ip, ifname in get_local_ip_addresses_and_interfaces(include_loopback=self._args.include_loopback):
            print(f"{ip}\t{ifname}")
        return 0

    def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    def run(self) -> int:
        """Run the hust command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(prog="hust", description="Discover and control lighting bridges.")


        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--request-timeout', dest='request_timeout', type=float, default=DEFAULT_REQUEST_TIMEOUT,
                            help=f'''The timeout for each HTTP request to a bridge, in seconds. Default: {DEFAULT_REQUEST_TIMEOUT}''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        def add_bridge_args(p: argparse.ArgumentParser, with_user: bool=True) -> None:
            p.add_argument('-l', '--location', required=True,
                           help='''The URL of the bridge description document, as reported by "hust search"''')
            if with_user:
                p.add_argument('-u', '--user', default=None,
                               help='''The registered username. Default: the username stored by "hust register"''')

        # ======================= search

        parser_search = subparsers.add_parser('search', description="Search for bridges on the local network")
        parser_search.add_argument('--wait-time', type=float, default=DEFAULT_DISCOVERY_TIMEOUT,
                            help=f'''The amount of time to wait for responses, in seconds. Default: {DEFAULT_DISCOVERY_TIMEOUT}''')
        parser_search.add_argument('-b', '--bind', dest="bind_address", default="0.0.0.0",
                            help='''The local IP address to bind to. Default: all interfaces''')
        parser_search.add_argument('-i', '--interface', default=None,
                            help='''The local IP address of the interface to send the multicast request on
                                    (see "hust interfaces"). Default: chosen by the OS''')
        parser_search.set_defaults(func=self.cmd_search)

        # ======================= register

        parser_register = subparsers.add_parser('register',
                                description="Register a new user with a bridge. Press the bridge's link button first.")
        add_bridge_args(parser_register, with_user=False)
        parser_register.add_argument('--devicetype', default=DEFAULT_DEVICE_TYPE,
                            help=f'''The client identifier to register. Default: "{DEFAULT_DEVICE_TYPE}"''')
        parser_register.add_argument('--no-save', dest='save', action='store_false', default=True,
                            help='Do not store the new username in the system keyring')
        parser_register.set_defaults(func=self.cmd_register)

        # ======================= lights

        parser_lights = subparsers.add_parser('lights', description="List the lights attached to a bridge")
        add_bridge_args(parser_lights)
        parser_lights.set_defaults(func=self.cmd_lights)

        # ======================= set

        parser_set = subparsers.add_parser('set', description="Set state attributes of a light")
        add_bridge_args(parser_set)
        parser_set.add_argument('light', help='The light identifier')
        parser_set.add_argument('assignments', nargs='+', metavar='KEY=VALUE',
                            help='''A state attribute assignment, e.g. "bri=200". Values are parsed as JSON if possible.''')
        parser_set.set_defaults(func=self.cmd_set)

        # ======================= power

        parser_power = subparsers.add_parser('power', description="Switch a light on or off")
        add_bridge_args(parser_power)
        parser_power.add_argument('light', help='The light identifier')
        parser_power.add_argument('state', choices=['on', 'off'])
        parser_power.set_defaults(func=self.cmd_power)

        # ======================= interfaces

        parser_interfaces = subparsers.add_parser('interfaces',
                                description='''List local IPV4 addresses, best multicast candidate first.''')
        parser_interfaces.add_argument('--include-loopback', action='store_true', default=False,
                            help='Include loopback addresses')
        parser_interfaces.set_defaults(func=self.cmd_interfaces)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], int] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"hust: error: {ex}", file=sys.stderr)

        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
