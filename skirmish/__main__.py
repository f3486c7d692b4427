from skirmish.main import main

raise SystemExit(main())
