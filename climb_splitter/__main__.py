from climb_splitter.cli.main import main

raise SystemExit(main())
