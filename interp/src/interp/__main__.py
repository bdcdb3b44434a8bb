"""Entry point: python -m interp

Subcommands:
    python -m interp render ...  → run_render
    python -m interp expand ...  → run_expand
"""

import sys

def main():
    if len(sys.argv) < 2:
        print("Usage:")
        print("  python -m interp render agent.yaml [args]  - Interpolate an agent's options")
        print("  python -m interp expand URL [args]         - Follow redirects of a URL")
        sys.exit(0)

    cmd = sys.argv[1]
    sys.argv = [sys.argv[0]] + sys.argv[2:]  # Remove subcommand from argv

    if cmd == "render":
        from interp.run_render import main as render_main
        sys.exit(render_main())
    elif cmd == "expand":
        from interp.run_expand import main as expand_main
        sys.exit(expand_main())
    else:
        print(f"Unknown command: {cmd}")
        print("Available: render, expand")
        sys.exit(1)

if __name__ == "__main__":
    main()
