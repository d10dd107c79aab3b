from website_checker.cli import main

raise SystemExit(main())
