#!/usr/bin/env python
import argparse
import sys
import os
import warnings

_showwarning = warnings.showwarning # store this

from . import debug,set_debug,get_debug,log,__version__
from .process import Runner

_RETURN = False # This gets reset by tests to make the cli return the object

class ConfigError(ValueError):
    pass

LIST_OPTIONS = ('rclone_flags','bisync_flags','resync_flags','steady_flags',
                'push_flags','sudo','default_folders')

class Config:
    def __init__(self,configpath=None):
        log(f'sharesync ({__version__})')
        log(f"config path: '{configpath}'")
        self._configpath = configpath
        self._config = {'_configpath':self._configpath}

        templatepath = os.path.join(os.path.dirname(__file__),'config_example.py')
        with open(templatepath,'rt') as file:
            self._template = file.read()

    def _write_template(self,outpath=None):
        if outpath is None:
            outpath = self._configpath
        if not outpath:
            raise ValueError('Must specify a path for the new config')

        txt = self._template.replace('__VERSION__',__version__)

        if os.path.exists(outpath):
            raise ValueError(f"Path '{outpath}' exists. Specify a different path or move the existing file")

        dirname = os.path.dirname(outpath)
        if dirname:
            os.makedirs(dirname,exist_ok=True)

        with open(outpath,'wt') as file:
            file.write(txt)

        debug(f"Wrote template config to {outpath}")

    def parse(self,skiplog=False,text=None):
        if not text:
            exec(self._template, self._config) # Only reset if reading
            if self._configpath:
                self._config['__file__'] = os.path.abspath(self._configpath)
                self._config['__dir__'] = os.path.dirname(self._config['__file__'])
                with open(self._configpath,'rt') as file:
                    os.chdir(self._config['__dir__']) # Globally set the program here
                    text = file.read()
        if text:
            exec(text,self._config)

        # clean up all of the junk
        _tmp = {}
        exec('',_tmp)
        for key in _tmp:
            self._config.pop(key,None)

        # Validate
        if not isinstance(self._config['remote'],str) or not self._config['remote'].strip(':'):
            raise ConfigError("Must specify 'remote'")
        self._config['remote'] = self._config['remote'].rstrip(':')

        reqs = {
            'sync_mode':('bisync','push'),
            'rclone_log':(True,False),
            'stop_on_failure':(True,False),
        }
        for key,options in reqs.items():
            val = self._config[key]
            if val not in options:
                raise ConfigError(f"'{key}' must be in {options}. Specified '{val}'")

        for key in LIST_OPTIONS:
            val = self._config[key]
            if not isinstance(val,(list,tuple)):
                raise ConfigError(f"'{key}' must be a list. Specified {repr(val)}")
            self._config[key] = list(val)

        if skiplog:
            return

        log(f"remote: '{self.remote}:' ({self.sync_mode})")
        log(f"sync folders: '{self.folders_config}'")

    def __repr__(self):
        # Need to watch out for RCLONE_CONFIG_PASS in rclone_env
        # make a copy of the dict fixing that one but do not
        # just do a deepcopy in case the user imported modules
        cfg = self._config.copy()
        cfg['rclone_env'] = cfg.get('rclone_env',{}).copy()

        if 'RCLONE_CONFIG_PASS' in cfg['rclone_env']:
            cfg['rclone_env']['RCLONE_CONFIG_PASS'] = '**REDACTED**'

        return ''.join([
            'Config(',
            ', '.join(f'{k}={repr(v)}' for k,v in cfg.items() if not k.startswith('_')),
            ')'])

    def __getattr__(self,attr):
        try:
            return self._config[attr]
        except KeyError:
            raise AttributeError(attr)

    def __setattr__(self,attr,value):
        if attr.startswith('_'):
            return super(Config, self).__setattr__(attr, value)

        self._config[attr]=value


DESCRIPTION="Multi-folder two-way sync of network shares to an rclone remote"
EPILOG = """\
Without --auto-sync, --new, or --break-lock, an interactive menu is shown.
See the sharesync config file template for details and settings
"""


def cli(argv=None):
    from .lock import RunLock
    from .main import RunCoordinator
    from .menu import Menu

    parser = argparse.ArgumentParser(\
            description=DESCRIPTION,
            epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter)

    parser.add_argument('configpath',nargs='?',default=None,
        help=('Specify the path to the config file. '
              'If `--new`, will be the path to write a new template. '
              'If not specified, the built-in defaults are used.'))

    parser.add_argument('--auto-sync',action='store_true',
        help='Unattended. Sync all folders once, without any prompts, and exit')
    parser.add_argument('--break-lock',action='store_true',
        help='Remove the run lock, even if held, and exit')
    parser.add_argument('--debug',action='store_true',help='Debug messages will be printed')
    parser.add_argument('-n','--dry-run',action='store_true',
        help='Pass --dry-run to rclone so nothing is changed')
    parser.add_argument('--new',action='store_true',help='Path to save a new config file')
    parser.add_argument('--override',action='append',default=list(),metavar="'OPTION = VALUE'",
        help=("Override any config option for this call only. Must be specified as "
              "'OPTION = VALUE', where VALUE should be properly shell escaped. "
              "Can specify multiple times. There is no input validation of any sort."))
    parser.add_argument('-q','--quiet',action='store_true',
        help='Do not echo to the console. The log file is still written')
    parser.add_argument('--version', action='version', version='sharesync-' + __version__)

    if argv is None:
        argv = sys.argv[1:]

    cliconfig = parser.parse_args(argv)

    if cliconfig.debug:
        set_debug(True)
        warnings.showwarning = _showwarning # restore
    else:
        set_debug(False)
        warnings.showwarning = showwarning # Monkey patch warnings.showwarning for CLI usage
    log.quiet = cliconfig.quiet

    debug('argv:',argv)
    debug('CLI config:',cliconfig)

    try:
        config = Config(cliconfig.configpath)

        if cliconfig.new:
            config._write_template()
            log(f"Config file written to '{cliconfig.configpath}'")
            return

        if cliconfig.configpath and not os.path.exists(cliconfig.configpath):
            raise ConfigError(f"config file '{cliconfig.configpath}' does not exist")

        config.parse() # NOTE: This now changes where the entire program is executed to the path of that file!
        if cliconfig.override:
            for item in cliconfig.override:
                log(f'CLI Override: {item}')
            config.parse(text='\n'.join(cliconfig.override),skiplog=True)

        for key,val in vars(cliconfig).items():
            if key not in ('configpath','override','new'):
                setattr(config,key,val)

        try:
            log.attach(config.log_file)
        except OSError as E:
            log.warning(f"Cannot write to log file '{config.log_file}': {E}")

        debug('config:',config)
        log("=== sharesync started ===")
        runner = Runner()

        if cliconfig.break_lock:
            RunLock(config.lock_file).break_lock()
            return

        if cliconfig.auto_sync:
            summary = RunCoordinator(config,runner).run_all()
            if _RETURN:
                return summary
            if summary.failed:
                sys.exit(1)
            return

        menu = Menu(config,runner)
        menu.loop()
        if _RETURN:
            return menu
    except Exception as E:
        import tempfile

        log.error(str(E))
        tmpdir = tempfile.mkdtemp(prefix='sharesync-')
        print(f"ERROR. Dumping logs (with debug) to '{tmpdir}/log.txt'",file=sys.stderr)
        log.dump(f'{tmpdir}/log.txt')

        if get_debug():
            raise
        sys.exit(1)
    finally:
        log.detach()

def showwarning(*args,**kwargs):
   log.warning(str(args[0]),file=sys.stderr)
