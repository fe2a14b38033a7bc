from millpane.cli import main

raise SystemExit(main())
