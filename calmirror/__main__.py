from calmirror.main import main

raise SystemExit(main())
