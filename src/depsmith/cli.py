# coding=utf-8
#

"""
 Copyright (c) 2019, Alexander Magola. All rights reserved.
 license: BSD 3-Clause License, see LICENSE for more details.
"""

import os
import sys
import argparse
from collections import defaultdict

from depsmith.constants import APPNAME, CAP_APPNAME, CWD
from depsmith.pyutils import struct
from depsmith.utils import envValToFloat
from depsmith import log
from depsmith.error import DepSmithLogicError

ParsedCommand = struct('ParsedCommand', 'name, args, orig')

"""
Object of ParsedCommand with current command after last parsing of command line.
This variable can be changed outside and is used to get CLI command and args.
"""
selected = None

class ConfItem(dict):
    """ Item of declarative CLI config with dot notation for fields """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name, value):
        self[name] = value

class Command(ConfItem):
    """ Class to set up a command for CLI """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setdefault('aliases', [])
        self.setdefault('usageTextTempl', "%s [options]")

# Declarative list of commands in CLI
COMMANDS = [
    Command(
        name = 'help',
        description = 'show help for a given topic or a help overview',
        usageTextTempl = "%s [command/topic]",
    ),
    Command(
        name = 'build',
        aliases = ['bld'],
        description = 'build libraries with their dependencies',
        usageTextTempl = "%s [options] [library [library] ... ]",
    ),
    Command(
        name = 'clean',
        aliases = ['c'],
        description = 'clean libraries',
        usageTextTempl = "%s [options] [library [library] ... ]",
    ),
    Command(
        name = 'plan',
        description = 'show build order of libraries without building',
        usageTextTempl = "%s [options] [library [library] ... ]",
    ),
    Command(
        name = 'version',
        aliases = ['ver'],
        description = 'print version of %s' % APPNAME,
    ),
]

# map: cmd name/alias -> Command
def _makeCmdNameMap():
    cmdNameMap = {}
    for cmd in COMMANDS:
        cmdNameMap[cmd.name] = cmd
        for alias in cmd.aliases:
            cmdNameMap[alias] = cmd
    return cmdNameMap

class PosArg(ConfItem):
    """ Class to set up positional param for CLI """

    NOTARGPARSE_FIELDS = ('name', 'commands')

# Declarative list of positional args after command name in CLI
POSARGS = [
    PosArg(
        name = 'libraries',
        nargs = '*', # optional list of args
        default = [],
        help = 'select libraries from depsconf, all libraries if nothing is selected',
        commands = ['build', 'clean', 'plan'],
    ),
]

class Option(ConfItem):
    """ Class to set up an option for CLI """

    NOTARGPARSE_FIELDS = ('names', 'commands', 'runcmd', 'isglobal')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setdefault('isglobal', False)
        self.setdefault('commands', [])
        self.setdefault('action', 'store')
        self.setdefault('type', None)
        self.setdefault('choices', None)
        self.setdefault('default', None)

# Commands which load depsconf
CONF_CMD_NAMES = ['build', 'clean', 'plan']

# Declarative list of options in CLI
# Special param 'runcmd' is used to declare option that runs another command
# before current. There is no need to set 'action' in that case.
OPTIONS = [
    # global options that are used before command in cmd line
    Option(
        names = ['-h', '--help'],
        isglobal = True,
        action = 'help',
        help = 'show this help message and exit',
    ),
    Option(
        names = ['--version'],
        isglobal = True,
        runcmd = 'version',
        help = 'alias for command "version"',
    ),
    # command options
    Option(
        names = ['-h', '--help'],
        action = 'help',
        commands = [x.name for x in COMMANDS], # for all commands
        help = 'show this help message for command and exit',
    ),
    Option(
        names = ['-c', '--clean'],
        commands = ['build'],
        runcmd = 'clean',
    ),
    Option(
        names = ['-f', '--force'],
        action = "store_true",
        commands = ['build'],
        help = 'rebuild selected libraries even if they are up to date',
    ),
    Option(
        names = ['-P', '--prebuilt'],
        action = "append",
        commands = ['build', 'clean'],
        help = 'library which is already built and must not be built, '
               'can be used several times',
    ),
    Option(
        names = ['-t', '--timeout'],
        type = float,
        commands = ['build', 'clean'],
        help = 'timeout in seconds for each command of libraries',
    ),
    Option(
        names = ['--conf'],
        dest = 'conf',
        commands = CONF_CMD_NAMES,
        help = 'path to the depsconf file',
    ),
    Option(
        names = ['-C', '--conf-dir'],
        dest = 'confDir',
        commands = CONF_CMD_NAMES,
        help = 'directory with the depsconf file',
    ),
    Option(
        names = ['-v', '--verbose'],
        action = "count",
        commands = [x.name for x in COMMANDS if x.name != 'help'],
        help = 'verbosity level -v or -vv',
    ),
    Option(
        names = ['--color'],
        choices = ('yes', 'no', 'auto'),
        commands = [x.name for x in COMMANDS if x.name not in ('help', 'version')],
        help = 'whether to use colors (yes/no/auto)',
    ),
]

OPTDEFAULTS = {
    'verbose': 0,
}

def _getReadyOptDefaults():

    # These params should be obtained only before parsing but
    # not when current python has loaded.
    _getenv = os.environ.get
    defaults = dict(OPTDEFAULTS)
    defaults.update({
        'color': _getenv('NOCOLOR', '') and 'no' or 'auto',
        'timeout' : envValToFloat(_getenv('DEPSMITH_TIMEOUT')),
        'conf-dir' : _getenv('DEPSMITH_CONF_DIR', None),
    })

    return defaults

class CmdLineParser(object):
    """
    CLI for DepSmith.
    """

    __slots__ = (
        '_defaults', '_globalOptions', '_command',
        '_parser', '_commandHelps', '_cmdNameMap', '_origArgs',
    )

    def __init__(self, progName, defaults = None):

        self._defaults = defaultdict(dict)
        self._defaults.update(_getReadyOptDefaults())
        if defaults:
            self._defaults.update(defaults)

        self._command = None
        self._origArgs = None

        self._globalOptions = [x for x in OPTIONS if x.isglobal]
        self._cmdNameMap = _makeCmdNameMap()

        class MyHelpFormatter(argparse.HelpFormatter):
            """ Some customization"""
            def __init__(self, prog):
                super().__init__(prog, max_help_position = 27)
                self._action_max_length = 23

        kwargs = dict(
            prog = progName,
            formatter_class = MyHelpFormatter,
            description = '%s: dependency-aware builder of native libraries' % CAP_APPNAME,
            usage = "%(prog)s <command> [options] [args]",
            add_help = False
        )
        self._parser = argparse.ArgumentParser(**kwargs)

        groupGlobal = self._parser.add_argument_group('global options')
        self._addOptions(groupGlobal, cmd = None)

        kwargs = dict(
            title = 'list of commands',
            help = '', metavar = '', dest = 'command'
        )
        subparsers = self._parser.add_subparsers(**kwargs)

        commandHelps = {}
        helpCmd = None
        for cmd in COMMANDS:
            cmdHelpInfo = dict(
                usage = self._makeCmdUsageText(progName, cmd),
                help = cmd.description,
                description = cmd.description.capitalize(),
                aliases = cmd.aliases,
            )
            commandHelps[cmd.name] = cmdHelpInfo

            if cmd.name == 'help': # It will be processed below
                helpCmd = cmd
                continue

            kwargs = dict(cmdHelpInfo, add_help = False)
            cmdParser = subparsers.add_parser(cmd.name, **kwargs)

            self._addCmdPosArgs(cmdParser, cmd)

            groupCmdOpts = cmdParser.add_argument_group('command options')
            self._addOptions(groupCmdOpts, cmd = cmd)
            cmdHelpInfo['help'] = cmdParser.format_help()

        # special case for 'help' command
        if helpCmd is None:
            raise DepSmithLogicError("Programming error: no command "
                                    "'help' in COMMANDS") # pragma: no cover
        kwargs = dict(commandHelps[helpCmd.name], add_help = True)
        cmdParser = subparsers.add_parser(helpCmd.name, **kwargs)
        cmdParser.add_argument('topic', nargs='?', default = 'overview')

        self._commandHelps = commandHelps

    def _getOptionDefault(self, opt):
        optName = opt.names[-1].replace('-', '', 2)
        return self._defaults.get(optName, None)

    @staticmethod
    def _joinCmdNameWithAliases(cmd):
        if not cmd.aliases:
            return cmd.name
        return cmd.name + '|' + '|'.join(cmd.aliases)

    @staticmethod
    def _makeCmdUsageText(progName, cmd):
        template = "%s " + cmd.usageTextTempl
        return template % (progName, CmdLineParser._joinCmdNameWithAliases(cmd))

    def _showHelp(self, cmdHelps, topic):
        if topic == 'overview':
            self._parser.print_help()
            return True

        _topic = self._cmdNameMap.get(topic, None)
        if _topic:
            _topic = _topic.name

        if _topic is None or _topic not in cmdHelps:
            log.error("Unknown command/topic to show help: '%s'" % topic)
            return False

        print(cmdHelps[_topic]['help'])
        return True

    def _addCmdPosArgs(self, target, cmd):
        posargs = [x for x in POSARGS if cmd.name in x.commands]
        for arg in posargs:
            kwargs = { k:v for k, v in arg.items() \
                            if v is not None and k not in PosArg.NOTARGPARSE_FIELDS }
            target.add_argument(arg.name, **kwargs)

    def _addOptions(self, target, cmd = None):
        if cmd is None:
            # get only global options
            options = self._globalOptions
        else:
            options = [x for x in OPTIONS \
                            if not x.isglobal and cmd.name in x.commands]

        for opt in options:
            kwargs = { k:v for k, v in opt.items() \
                            if v is not None and k not in Option.NOTARGPARSE_FIELDS }

            if 'runcmd' in opt:
                kwargs['action'] = "store_true"
                if 'help' in opt:
                    kwargs['help'] = opt.help
                else:
                    kwargs['help'] = "run command '%s' before command '%s'" \
                                  % (opt.runcmd, cmd.name)
            else:
                default = self._getOptionDefault(opt)
                if default is not None:
                    kwargs['default'] = default
                    kwargs['help'] += ' [default: %r]' % kwargs['default']

            target.add_argument(*opt.names, **kwargs)

    def _fillCmdInfo(self, parsedArgs):
        args = ConfItem(vars(parsedArgs))
        for opt in self._globalOptions:
            if 'runcmd' in opt:
                optName = opt.names[-1].replace('-', '', 2)
                args.pop(optName, None)
        cmd = self._cmdNameMap[args.pop('command')]
        self._command = ParsedCommand(
            name = cmd.name,
            args = args,
            orig = self._origArgs,
        )

    def _postProcess(self):
        args = self._command.args
        for name in ('conf', 'confDir'):
            path = args.get(name)
            if path and not os.path.isabs(path):
                args[name] = os.path.normpath(os.path.join(CWD, path))
        if 'prebuilt' in args and args.prebuilt is None:
            args.prebuilt = []

    def parse(self, args = None, defaultCmd = 'help'):
        """ Parse command line args """

        if args is None:
            args = sys.argv[1:]

        args = list(args)
        self._origArgs = list(args)

        globalOpts = self._globalOptions
        if args:
            for opt in globalOpts:
                runcmd = opt.get('runcmd')
                if runcmd and args[0] in opt.names:
                    # convert option into corresponding command
                    args[0] = runcmd
                    break

        # simple hack to set default command
        if not args or args[0].startswith('-'):
            # don't use global options for default command
            forbiddenNames = [y for x in globalOpts for y in x.names]
            if not any(x in forbiddenNames for x in args):
                args.insert(0, defaultCmd)
                self._origArgs.insert(0, defaultCmd)

        # parse
        parsedArgs = self._parser.parse_args(args)
        cmd = self._cmdNameMap[parsedArgs.command]

        if cmd.name == 'help':
            self._fillCmdInfo(parsedArgs)
            sys.exit(not self._showHelp(self._commandHelps, parsedArgs.topic))

        self._fillCmdInfo(parsedArgs)
        self._postProcess()
        return self._command

    @property
    def command(self):
        """ current command after last parsing of command line"""
        return self._command

def parseAll(args, defaults = None):
    """
    Parse all command line args with CmdLineParser and save selected
    command as object of ParsedCommand in global var 'selected' of this module.
    Returns selected command as object of ParsedCommand.
    """

    # pylint: disable = global-statement
    global selected

    parser = CmdLineParser(APPNAME, defaults)
    selected = parser.parse(args[1:])
    return selected
