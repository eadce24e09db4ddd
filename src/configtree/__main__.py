from configtree.cli import main

raise SystemExit(main())
