from photo_pipeline.cli import main

raise SystemExit(main())
