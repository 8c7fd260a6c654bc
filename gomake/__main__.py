from gomake.cli import main

raise SystemExit(main())
