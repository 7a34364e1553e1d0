from quackfetch.cli import main

raise SystemExit(main())
