"""Module entry point."""

from __future__ import annotations

from .cli import main

# Enable faulthandler early so fatal crashes inside SDL produce a traceback
# written to disk.
try:
    import faulthandler, os
    os.makedirs("logs", exist_ok=True)
    faulthandler_log = open(os.path.join("logs", "faulthandler.log"), "a")
    faulthandler.enable(faulthandler_log)
except Exception:
    try:
        import faulthandler as _fh
        _fh.enable()
    except Exception:
        pass


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except SystemExit:
        raise
    except Exception:
        import sys as _sys, os as _os, traceback as _tb
        text = "[__main__] uncaught exception:\n" + _tb.format_exc()
        try:
            _sys.stderr.write(text)
            _sys.stderr.flush()
        except Exception:
            pass
        try:
            _os.makedirs("logs", exist_ok=True)
            with open(_os.path.join("logs", "exit_diagnostics.log"), "a", encoding="utf-8") as f:
                f.write(text)
        except Exception:
            pass
        raise
