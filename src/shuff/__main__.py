from shuff.cli import main

raise SystemExit(main())
