from mirrorboard.cli import main

raise SystemExit(main())
